"""
Generation Service: 메뉴 텍스트 → 요리별 사진.

상태 머신:
    Idle → ParsingMenu → Done (에러)
                       → AwaitingImages → (모든 entry 종료 시 view_status=Done)

동시성 모델 (asyncio 단일 스레드 협력형):
- suspension point: parse_menu 응답 대기, 요리별 generate_image 응답 대기
- 요리별 이미지 작업은 index 순으로 시작되지만 완료 순서는 임의
- 완료 처리: 최신 entries 읽기 → 해당 index만 교체 → 전체 tuple 다시 쓰기
  (await 없이 한 번에 수행되므로 다른 완료와 섞이지 않음)
- run마다 generation 번호를 붙이고, 번호가 다른 늦은 결과는 버림
- 취소 없음: 새 submit이 와도 이전 이미지 작업은 계속 실행되고 결과만 버려짐
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from src.core.logging import (
    complete_run_log,
    create_run_log,
    emit_warning,
    record_dish_result,
    settle_result,
)
from src.domain.constants import IMAGE_FAILED_MESSAGE
from src.domain.errors import (
    EmptyInputError,
    EmptyResultError,
    ErrorCodes,
    GenerationError,
    ImageGenError,
    ParseError,
    RunInProgressError,
)
from src.domain.schemas import (
    DisplayEntry,
    Dish,
    OverallStatus,
    PhotoStyle,
    SessionState,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MenuGenerationController:
    """
    메뉴 사진 생성 컨트롤러.

    세션 상태(SessionState)를 단독 소유하고, submit 1회를 run 1개로 관리.

    Usage:
        controller = MenuGenerationController(provider)
        await controller.submit(menu_text, PhotoStyle.RUSTIC)
        await controller.wait_until_settled()
        controller.state.entries  # [Ready | Failed, ...]
    """

    def __init__(
        self,
        provider: Any,
        state: SessionState | None = None,
        parse_timeout: float | None = None,
        image_timeout: float | None = None,
        lock_submit_while_running: bool = False,
    ):
        """
        Args:
            provider: parse_menu / generate_image를 제공하는 GenerationProvider
            state: 세션 상태 (None이면 새로 생성)
            parse_timeout: 메뉴 파싱 타임아웃 (초, None이면 무제한)
            image_timeout: 요리별 이미지 타임아웃 (초, None이면 무제한)
            lock_submit_while_running: True면 진행 중 재제출 거부
        """
        self.provider = provider
        self.state = state if state is not None else SessionState()
        self.parse_timeout = parse_timeout
        self.image_timeout = image_timeout
        self.lock_submit_while_running = lock_submit_while_running

        # 진행 중인 이미지 작업 → 소속 generation (GC 방지용 강한 참조)
        self._tasks: dict[asyncio.Task[None], int] = {}

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def is_running(self) -> bool:
        """현재 run이 아직 끝나지 않았는지."""
        status = self.state.overall_status
        if status is OverallStatus.PARSING_MENU:
            return True
        return status is OverallStatus.AWAITING_IMAGES and not self.state.is_settled

    @property
    def outstanding_tasks(self) -> int:
        """아직 끝나지 않은 이미지 작업 수 (이전 run 포함)."""
        return len(self._tasks)

    def select_style(self, style: PhotoStyle | str) -> PhotoStyle:
        """
        스타일 선택.

        이후 submit에만 적용. 기존 entries는 다시 생성하지 않음.

        Raises:
            ValueError: 알 수 없는 스타일
        """
        selected = PhotoStyle(style)
        self.state.selected_style = selected
        return selected

    async def submit(
        self,
        menu_text: str,
        style: PhotoStyle | str | None = None,
    ) -> SessionState:
        """
        메뉴 제출 (run 시작).

        파싱이 끝날 때까지 대기하고, 요리별 이미지 작업은 백그라운드로 시작한 뒤 반환.
        파싱 실패/요리 없음은 예외 없이 overall_error로 기록.

        Args:
            menu_text: 메뉴 텍스트
            style: 사용할 스타일 (None이면 현재 선택된 스타일)

        Returns:
            갱신된 SessionState

        Raises:
            EmptyInputError: 입력이 비어 있음 (provider 호출 없음)
            RunInProgressError: lock_submit_while_running이고 이전 run 진행 중
            ValueError: 알 수 없는 스타일
        """
        requested_style = PhotoStyle(style) if style is not None else None

        if not menu_text or not menu_text.strip():
            error = EmptyInputError(ErrorCodes.EMPTY_INPUT, "Menu text is empty")
            self.state.overall_error = error.user_message
            self.state.error_code = error.code
            raise error

        if self.lock_submit_while_running and self.is_running:
            raise RunInProgressError(
                ErrorCodes.RUN_IN_PROGRESS,
                "Previous run is still in progress",
                generation=self.state.generation,
            )

        if requested_style is not None:
            self.state.selected_style = requested_style
        run_style = self.state.selected_style

        generation = self._start_run(menu_text, run_style)

        try:
            dishes = await self._with_timeout(
                self.provider.parse_menu(menu_text), self.parse_timeout
            )
        except Exception as e:
            if not self._is_current(generation):
                logger.debug(f"Ignoring parse failure of superseded run {generation}")
                return self.state
            logger.error(f"Failed to parse menu (run {generation}): {e}", exc_info=True)
            self._fail_run(self._as_parse_error(e), result="parse_failed")
            return self.state

        if not self._is_current(generation):
            logger.debug(f"Discarding parse result of superseded run {generation}")
            return self.state

        if not dishes:
            self._fail_run(
                EmptyResultError(ErrorCodes.NO_DISHES_FOUND, "Menu contained no dishes"),
                result="no_dishes",
            )
            return self.state

        self._fan_out(generation, list(dishes), run_style)
        return self.state

    async def wait_until_settled(self) -> SessionState:
        """현재 run의 이미지 작업이 모두 끝날 때까지 대기."""
        generation = self.state.generation
        tasks = [task for task, gen in self._tasks.items() if gen == generation]
        if tasks:
            await asyncio.gather(*tasks)
        return self.state

    # =========================================================================
    # Run lifecycle
    # =========================================================================

    def _start_run(self, menu_text: str, style: PhotoStyle) -> int:
        """새 run 시작: 이전 결과/에러 초기화, generation 증가."""
        state = self.state

        if state.run_log is not None and not state.run_log.is_finished:
            complete_run_log(state.run_log, "superseded")

        state.generation += 1
        state.menu_text = menu_text
        state.overall_status = OverallStatus.PARSING_MENU
        state.overall_error = None
        state.error_code = None
        state.entries = ()
        state.run_log = create_run_log(state.generation, style.value)

        logger.info(
            f"Run {state.run_log.run_id} started "
            f"(generation={state.generation}, style={style.value})"
        )
        return state.generation

    def _fail_run(self, error: GenerationError, result: str) -> None:
        """세션 단위 실패: 이미지 작업 없이 run 종료."""
        state = self.state
        state.overall_status = OverallStatus.DONE
        state.overall_error = error.user_message
        state.error_code = error.code
        state.entries = ()

        if state.run_log is not None:
            complete_run_log(
                state.run_log,
                result,
                error_code=error.code,
                error_context=error.to_dict(),
            )

    def _fan_out(self, generation: int, dishes: list[Dish], style: PhotoStyle) -> None:
        """요리마다 Pending entry 생성 후 이미지 작업을 index 순으로 시작."""
        state = self.state
        state.entries = tuple(DisplayEntry(dish=dish) for dish in dishes)
        state.overall_status = OverallStatus.AWAITING_IMAGES
        if state.run_log is not None:
            state.run_log.dish_count = len(dishes)

        for index, dish in enumerate(dishes):
            task = asyncio.create_task(
                self._generate_one(generation, index, dish, style),
                name=f"menu-image-{generation}-{index}",
            )
            self._tasks[task] = generation
            task.add_done_callback(self._forget_task)

    def _forget_task(self, task: asyncio.Task[None]) -> None:
        self._tasks.pop(task, None)

    # =========================================================================
    # Per-dish pipeline
    # =========================================================================

    async def _generate_one(
        self,
        generation: int,
        index: int,
        dish: Dish,
        style: PhotoStyle,
    ) -> None:
        """요리 1개 이미지 생성 → 해당 index만 갱신. 예외를 밖으로 던지지 않음."""
        try:
            image_ref = await self._with_timeout(
                self.provider.generate_image(dish, style), self.image_timeout
            )
            if not image_ref:
                raise ImageGenError(
                    ErrorCodes.NO_IMAGES_RETURNED,
                    "Provider returned an empty image reference",
                    dish=dish.name,
                )
        except Exception as e:
            logger.warning(
                f"Failed to generate image for dish #{index} {dish.name!r} "
                f"(run {generation}): {e}"
            )
            self._apply_result(generation, index, image_ref=None, error=e)
            return

        self._apply_result(generation, index, image_ref=image_ref, error=None)

    def _apply_result(
        self,
        generation: int,
        index: int,
        image_ref: str | None,
        error: Exception | None,
    ) -> None:
        """
        요리 결과 병합.

        최신 entries를 읽고 index 하나만 교체한 새 tuple을 기록.
        이 함수 안에는 await가 없으므로 다른 완료 처리와 섞이지 않음.
        """
        if not self._is_current(generation):
            logger.debug(
                f"Discarding stale image result for dish #{index} "
                f"(run {generation}, current {self.state.generation})"
            )
            return

        entries = self.state.entries
        current = entries[index]
        if not current.is_pending:
            logger.debug(f"Dish #{index} already resolved as {current.status.value}")
            return

        if error is None and image_ref:
            updated = current.ready(image_ref)
        else:
            updated = current.failed(IMAGE_FAILED_MESSAGE)

        self.state.entries = entries[:index] + (updated,) + entries[index + 1:]
        self._record_dish(index, current.dish, error)

    def _record_dish(self, index: int, dish: Dish, error: Exception | None) -> None:
        """run log 집계, 모든 요리가 끝나면 run 종료."""
        run_log = self.state.run_log
        if run_log is None:
            return

        record_dish_result(run_log, success=error is None)
        if error is not None:
            code = error.code if isinstance(error, GenerationError) else ErrorCodes.IMAGE_GEN_FAILED
            emit_warning(
                run_log,
                code=code,
                message=str(error) or type(error).__name__,
                index=index,
                dish_name=dish.name,
            )

        if self.state.is_settled:
            complete_run_log(run_log, settle_result(run_log))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _is_current(self, generation: int) -> bool:
        return generation == self.state.generation

    @staticmethod
    async def _with_timeout(awaitable: Awaitable[T], timeout: float | None) -> T:
        """timeout이 None이면 무제한 대기."""
        if timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, timeout)

    @staticmethod
    def _as_parse_error(error: Exception) -> ParseError:
        """파싱 단계 예외 → ParseError (타임아웃 포함)."""
        if isinstance(error, ParseError):
            return error
        if isinstance(error, TimeoutError):
            return ParseError(ErrorCodes.PROVIDER_TIMEOUT, "Menu parsing timed out")
        if isinstance(error, GenerationError):
            return ParseError(error.code, error.message, **error.context)
        return ParseError(ErrorCodes.MENU_PARSE_FAILED, str(error) or type(error).__name__)
