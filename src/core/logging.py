"""
Run logging: run log schema, events, warnings

규칙:
- submit 1회마다 RunLog 1개 (메모리 보관, 파일 저장 없음)
- 요리 단위 실패는 warning으로 기록 (index, dish_name 필수)
- run 종료 시 한 줄 요약을 logging으로 출력
"""

import logging
from datetime import UTC, datetime
from typing import Any

from src.core.ids import generate_run_id
from src.domain.schemas import RunLog, WarningLog

logger = logging.getLogger(__name__)

# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(generation: int, style: str) -> RunLog:
    """
    새 RunLog 생성.

    Args:
        generation: 세션 실행 카운터
        style: 이번 run에 사용할 스타일 id

    Returns:
        초기화된 RunLog
    """
    now = datetime.now(UTC).isoformat()

    return RunLog(
        run_id=generate_run_id(),
        generation=generation,
        style=style,
        started_at=now,
        result="pending",
    )


def emit_warning(
    run_log: RunLog,
    code: str,
    message: str,
    index: int | None = None,
    dish_name: str | None = None,
) -> None:
    """
    경고 이벤트 기록.

    Args:
        run_log: RunLog 인스턴스
        code: 경고 코드 (ErrorCodes)
        message: 경고 메시지
        index: 요리 index (요리 단위 경고일 때)
        dish_name: 요리 이름
    """
    warning = WarningLog(
        level="warning",
        code=code,
        index=index,
        dish_name=dish_name,
        message=message,
    )
    run_log.warnings.append(warning)


def record_dish_result(run_log: RunLog, success: bool) -> None:
    """요리 한 개의 이미지 결과 집계."""
    if success:
        run_log.ready_count += 1
    else:
        run_log.failed_count += 1


def complete_run_log(
    run_log: RunLog,
    result: str,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RunLog 완료 처리.

    이미 완료된 run은 다시 닫지 않음.

    Args:
        run_log: RunLog 인스턴스
        result: parse_failed, no_dishes, success, partial, failed, superseded
        error_code: 에러 코드 (세션 단위 실패 시)
        error_context: 에러 컨텍스트
    """
    if run_log.is_finished:
        return

    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = result
    if error_code is not None:
        run_log.error_code = error_code
        run_log.error_context = error_context

    logger.info(summarize_run_log(run_log))


def settle_result(run_log: RunLog) -> str:
    """모든 요리 처리 후 최종 result 결정."""
    if run_log.failed_count == 0:
        return "success"
    if run_log.ready_count == 0:
        return "failed"
    return "partial"


def summarize_run_log(run_log: RunLog) -> str:
    """로그 출력용 한 줄 요약."""
    summary = (
        f"Run {run_log.run_id} (generation={run_log.generation}, "
        f"style={run_log.style}) finished: {run_log.result}"
    )
    if run_log.dish_count:
        summary += (
            f" [{run_log.ready_count} ready, {run_log.failed_count} failed "
            f"of {run_log.dish_count}]"
        )
    if run_log.error_code:
        summary += f" error={run_log.error_code}"
    return summary
