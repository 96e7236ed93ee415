"""
Application Services.

역할:
- generation: 메뉴 파싱 → 요리별 사진 생성 상태 머신
- sessions: 브라우저 세션별 컨트롤러 보관
"""

from .generation import MenuGenerationController
from .sessions import SessionStore

__all__ = [
    "MenuGenerationController",
    "SessionStore",
]
