"""
Session Store: 브라우저 세션 ↔ 컨트롤러 매핑.

- 메모리에만 보관 (영속화 없음)
- 세션 수 상한 초과 시 가장 오래 사용되지 않은 세션부터 제거
"""

import logging
from collections import OrderedDict
from typing import Any

from src.app.services.generation import MenuGenerationController
from src.core.ids import generate_session_id
from src.domain.schemas import PhotoStyle, SessionState

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 500


class SessionStore:
    """
    세션별 MenuGenerationController 저장소.

    Usage:
        store = SessionStore.from_config(provider, config)
        session_id, controller = store.create()
        controller = store.get(session_id)
    """

    def __init__(
        self,
        provider: Any,
        parse_timeout: float | None = None,
        image_timeout: float | None = None,
        lock_submit_while_running: bool = False,
        default_style: PhotoStyle = PhotoStyle.MODERN,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self.provider = provider
        self.parse_timeout = parse_timeout
        self.image_timeout = image_timeout
        self.lock_submit_while_running = lock_submit_while_running
        self.default_style = default_style
        self.max_sessions = max_sessions
        self._controllers: OrderedDict[str, MenuGenerationController] = OrderedDict()

    @classmethod
    def from_config(cls, provider: Any, config: dict[str, Any]) -> "SessionStore":
        """default.yaml의 ai / ui 섹션으로 생성."""
        ai_config = config.get("ai", {}) or {}
        ui_config = config.get("ui", {}) or {}
        return cls(
            provider=provider,
            parse_timeout=ai_config.get("parse_timeout"),
            image_timeout=ai_config.get("image_timeout"),
            lock_submit_while_running=bool(ui_config.get("lock_submit_while_running", False)),
            default_style=PhotoStyle(ui_config.get("default_style") or PhotoStyle.MODERN.value),
            max_sessions=int(ui_config.get("max_sessions") or DEFAULT_MAX_SESSIONS),
        )

    def __len__(self) -> int:
        return len(self._controllers)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._controllers

    def create(self, session_id: str | None = None) -> tuple[str, MenuGenerationController]:
        """새 세션 생성."""
        session_id = session_id or generate_session_id()
        controller = MenuGenerationController(
            self.provider,
            state=SessionState(selected_style=self.default_style),
            parse_timeout=self.parse_timeout,
            image_timeout=self.image_timeout,
            lock_submit_while_running=self.lock_submit_while_running,
        )
        self._controllers[session_id] = controller
        self._evict_overflow()
        return session_id, controller

    def get(self, session_id: str) -> MenuGenerationController | None:
        """세션 조회 (사용 시점 갱신)."""
        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
        return controller

    def get_or_create(self, session_id: str) -> MenuGenerationController:
        """있으면 조회, 없으면 같은 ID로 생성 (서버 재시작 후 재접속 등)."""
        controller = self.get(session_id)
        if controller is None:
            _, controller = self.create(session_id)
        return controller

    def _evict_overflow(self) -> None:
        while len(self._controllers) > self.max_sessions:
            evicted_id, _ = self._controllers.popitem(last=False)
            logger.info(f"Evicted idle session {evicted_id}")
