"""
Data schemas for menu photo generation.

규칙:
- Dish는 parse_menu만 생성, 생성 후 불변
- DisplayEntry 상태 전이: Pending → Ready | Pending → Failed (역전 없음)
- entries 길이는 fan-out 시점에 고정, 갱신은 index 단위 교체
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .constants import DEFAULT_STYLE_ID, STYLE_BY_ID, StyleOption

# =============================================================================
# Enums
# =============================================================================

class PhotoStyle(str, Enum):
    """사진 스타일 (UI 선택지 3개 고정)."""
    RUSTIC = "rustic"
    MODERN = "modern"
    SOCIAL = "social"

    @property
    def option(self) -> StyleOption:
        """표시 이름/설명/프롬프트 조각."""
        return STYLE_BY_ID[self.value]

    @classmethod
    def default(cls) -> "PhotoStyle":
        return cls(DEFAULT_STYLE_ID)


class OverallStatus(str, Enum):
    """
    세션 전체 상태.

    Idle → ParsingMenu → Done (에러) | AwaitingImages → Done
    """
    IDLE = "idle"
    PARSING_MENU = "parsing_menu"
    AWAITING_IMAGES = "awaiting_images"
    DONE = "done"


class EntryStatus(str, Enum):
    """요리별 이미지 상태."""
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


# =============================================================================
# Core Schemas
# =============================================================================

@dataclass(frozen=True)
class Dish:
    """메뉴에서 추출된 요리 (name 필수, description은 빈 문자열 허용)."""
    name: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Dish name must be non-empty")

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass(frozen=True)
class DisplayEntry:
    """
    화면 표시용 요리 항목.

    불변 값. 상태 변경은 ready()/failed()가 새 entry를 반환.
    """
    dish: Dish
    status: EntryStatus = EntryStatus.PENDING
    image_ref: str | None = None
    error_message: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is EntryStatus.PENDING

    def ready(self, image_ref: str) -> "DisplayEntry":
        """Pending → Ready."""
        self._require_pending(EntryStatus.READY)
        return replace(self, status=EntryStatus.READY, image_ref=image_ref)

    def failed(self, error_message: str) -> "DisplayEntry":
        """Pending → Failed."""
        self._require_pending(EntryStatus.FAILED)
        return replace(self, status=EntryStatus.FAILED, error_message=error_message)

    def _require_pending(self, target: EntryStatus) -> None:
        if not self.is_pending:
            raise ValueError(
                f"Invalid transition {self.status.value} -> {target.value} "
                f"for dish {self.dish.name!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dish": self.dish.to_dict(),
            "status": self.status.value,
            "image_ref": self.image_ref,
            "error_message": self.error_message,
        }


# =============================================================================
# Run Log Schema (core/logging.py에서 사용)
# =============================================================================

@dataclass
class WarningLog:
    """
    경고 로그.

    요리 단위 실패는 index + dish_name으로 추적.
    """
    level: str = "warning"
    code: str = ""
    index: int | None = None
    dish_name: str | None = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "index": self.index,
            "dish_name": self.dish_name,
            "message": self.message,
        }


@dataclass
class RunLog:
    """
    실행 로그.

    submit 1회 = run 1개. 메모리에만 보관 (영속화 없음).
    """
    run_id: str
    generation: int
    style: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    # pending, parse_failed, no_dishes, success, partial, failed, superseded
    result: str = "pending"

    dish_count: int = 0
    ready_count: int = 0
    failed_count: int = 0

    warnings: list[WarningLog] = field(default_factory=list)

    # Error (session level)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "generation": self.generation,
            "style": self.style,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "dish_count": self.dish_count,
            "ready_count": self.ready_count,
            "failed_count": self.failed_count,
            "warnings": [w.to_dict() for w in self.warnings],
            "error_code": self.error_code,
            "error_context": self.error_context,
        }


# =============================================================================
# Session State
# =============================================================================

@dataclass
class SessionState:
    """
    브라우저 세션 1개의 상태.

    컨트롤러가 단독 소유. entries는 tuple로 보관하고
    갱신 시 항상 새 tuple로 교체 (read latest → replace index → write back).
    """
    menu_text: str = ""
    overall_status: OverallStatus = OverallStatus.IDLE
    overall_error: str | None = None
    error_code: str | None = None
    selected_style: PhotoStyle = field(default_factory=PhotoStyle.default)
    entries: tuple[DisplayEntry, ...] = ()

    # 실행 카운터 (submit마다 증가, 늦게 도착한 이전 run 결과 차단용)
    generation: int = 0
    run_log: RunLog | None = None

    @property
    def is_settled(self) -> bool:
        """Pending entry가 하나도 없으면 True."""
        return not any(entry.is_pending for entry in self.entries)

    @property
    def view_status(self) -> OverallStatus:
        """
        화면용 파생 상태.

        이미지 대기 중이라도 모든 entry가 끝났으면 DONE으로 표시.
        """
        if self.overall_status is OverallStatus.AWAITING_IMAGES and self.is_settled:
            return OverallStatus.DONE
        return self.overall_status

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용."""
        return {
            "menu_text": self.menu_text,
            "overall_status": self.overall_status.value,
            "view_status": self.view_status.value,
            "overall_error": self.overall_error,
            "error_code": self.error_code,
            "selected_style": self.selected_style.value,
            "entries": [entry.to_dict() for entry in self.entries],
            "generation": self.generation,
            "is_settled": self.is_settled,
            "run": self.run_log.to_dict() if self.run_log else None,
        }
