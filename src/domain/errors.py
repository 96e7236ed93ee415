"""
Error definitions for menu photo generation.

규칙:
- 모든 에러는 복구 가능하며 사용자에게 표시됨 (프로세스 종료 없음)
- 세션 단위: EmptyInputError, ParseError, EmptyResultError → 이미지 작업 시작 전 중단
- 요리 단위: ImageGenError → 해당 entry에만 기록, 다른 entry에 영향 없음
"""

from typing import Any

from .constants import (
    EMPTY_INPUT_MESSAGE,
    IMAGE_FAILED_MESSAGE,
    NO_DISHES_MESSAGE,
    PARSE_FAILED_MESSAGE,
    RUN_IN_PROGRESS_MESSAGE,
)

# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Session level ===
    EMPTY_INPUT = "EMPTY_INPUT"
    MENU_PARSE_FAILED = "MENU_PARSE_FAILED"
    NO_DISHES_FOUND = "NO_DISHES_FOUND"
    RUN_IN_PROGRESS = "RUN_IN_PROGRESS"

    # === Dish level ===
    IMAGE_GEN_FAILED = "IMAGE_GEN_FAILED"
    NO_IMAGES_RETURNED = "NO_IMAGES_RETURNED"

    # === Provider ===
    API_KEY_MISSING = "API_KEY_MISSING"
    UNKNOWN_PROVIDER = "UNKNOWN_PROVIDER"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"


class GenerationError(Exception):
    """
    메뉴 사진 생성 관련 에러 베이스.

    message는 로그용 기술 메시지, user_message는 화면 표시용 고정 문구.

    Usage:
        raise ParseError(ErrorCodes.MALFORMED_RESPONSE, "invalid JSON", model=model)
    """

    default_code = "GENERATION_ERROR"
    user_message = "Something went wrong."

    def __init__(self, code: str | None = None, message: str = "", **context: Any) -> None:
        self.code = code or self.default_code
        self.message = message or self.user_message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        base = f"[{self.code}] {self.message}"
        return f"{base} ({ctx_str})" if ctx_str else base

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class EmptyInputError(GenerationError):
    """메뉴 입력이 비어 있음 (로컬 검증, provider 호출 없음)."""
    default_code = ErrorCodes.EMPTY_INPUT
    user_message = EMPTY_INPUT_MESSAGE


class ParseError(GenerationError):
    """메뉴 텍스트 이해 실패 (전송 오류, 응답 형식 오류)."""
    default_code = ErrorCodes.MENU_PARSE_FAILED
    user_message = PARSE_FAILED_MESSAGE


class EmptyResultError(GenerationError):
    """메뉴는 이해했으나 요리를 찾지 못함."""
    default_code = ErrorCodes.NO_DISHES_FOUND
    user_message = NO_DISHES_MESSAGE


class ImageGenError(GenerationError):
    """요리 한 개의 이미지 생성 실패."""
    default_code = ErrorCodes.IMAGE_GEN_FAILED
    user_message = IMAGE_FAILED_MESSAGE


class RunInProgressError(GenerationError):
    """이전 실행이 끝나기 전 재제출 (lock_submit_while_running 설정 시)."""
    default_code = ErrorCodes.RUN_IN_PROGRESS
    user_message = RUN_IN_PROGRESS_MESSAGE


class ProviderConfigError(GenerationError):
    """Provider 설정 오류 (API 키 누락, 알 수 없는 provider)."""
    default_code = ErrorCodes.API_KEY_MISSING
    user_message = "The generation service is not configured."
