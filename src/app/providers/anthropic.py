"""
Anthropic (Claude) Menu Parser.

Gemini 대신 Claude로 메뉴를 파싱하는 대체 provider.
config: ai.menu_parser.provider = "anthropic"

- response schema 강제가 없으므로 프롬프트로 JSON 배열 응답 요구
- ```json 블록으로 감싼 응답도 허용
"""

import logging
import os
from typing import Any

import anthropic

from src.domain.constants import DEFAULT_CLAUDE_TEXT_MODEL
from src.domain.errors import ErrorCodes, ParseError, ProviderConfigError
from src.domain.schemas import Dish

from .base import MenuParser, describe_error, dishes_from_json
from .prompts import build_menu_prompt

logger = logging.getLogger(__name__)


class ClaudeMenuParser(MenuParser):
    """
    Claude 메뉴 파서.

    Usage:
        parser = ClaudeMenuParser(model="claude-sonnet-4-20250514")
        dishes = await parser.parse_menu(menu_text)
    """

    def __init__(
        self,
        model: str = DEFAULT_CLAUDE_TEXT_MODEL,
        api_key: str | None = None,
        max_tokens: int = 4096,
        temperature: float | None = None,
    ):
        """
        Args:
            model: 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 MY_ANTHROPIC_KEY 또는 ANTHROPIC_API_KEY 사용 가능)
            max_tokens: 최대 토큰 수
            temperature: 샘플링 온도 (None이면 API 기본값)

        Raises:
            ProviderConfigError: API 키가 없을 때 (fail-fast)
        """
        self.model = model
        # API 키 결정: 인자 > MY_ANTHROPIC_KEY > ANTHROPIC_API_KEY
        self.api_key = (
            api_key
            or os.environ.get("MY_ANTHROPIC_KEY")
            or os.environ.get("ANTHROPIC_API_KEY")
        )

        # Fail-fast: 키가 없으면 즉시 에러 (나중에 모호한 에러 방지)
        if not self.api_key:
            raise ProviderConfigError(
                ErrorCodes.API_KEY_MISSING,
                "Anthropic API key is missing. "
                "Set MY_ANTHROPIC_KEY or ANTHROPIC_API_KEY.",
            )

        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: Any = None

    def _get_client(self) -> Any:
        """Anthropic 클라이언트 (lazy init)."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    async def parse_menu(self, menu_text: str) -> list[Dish]:
        """메뉴 텍스트 → Dish 목록."""
        prompt = build_menu_prompt(menu_text, json_suffix=True)

        api_kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.temperature is not None:
            api_kwargs["temperature"] = self.temperature

        try:
            response = await self._get_client().messages.create(**api_kwargs)
        except Exception as e:
            logger.error(f"Menu parsing request failed ({self.model}): {e}", exc_info=True)
            raise ParseError(
                ErrorCodes.MENU_PARSE_FAILED,
                self._get_user_friendly_error_message(e),
                model=self.model,
            ) from e

        if not response.content:
            raise ParseError(
                ErrorCodes.MALFORMED_RESPONSE,
                "Empty response from model",
                model=self.model,
            )

        dishes = dishes_from_json(response.content[0].text)
        logger.info(f"Parsed {len(dishes)} dishes with {self.model}")
        return dishes

    def _get_user_friendly_error_message(self, error: Exception) -> str:
        """사용자 친화적인 에러 메시지 생성."""
        if isinstance(error, anthropic.APITimeoutError):
            return "The Anthropic API timed out."
        elif isinstance(error, anthropic.APIConnectionError):
            return "Could not connect to the Anthropic API."
        elif isinstance(error, anthropic.RateLimitError):
            return "Anthropic API quota exceeded. Try again later."
        elif isinstance(error, anthropic.AuthenticationError):
            return "Anthropic API authentication failed. Check MY_ANTHROPIC_KEY."
        elif isinstance(error, anthropic.PermissionDeniedError):
            return "The Anthropic API key lacks permission for this request."
        elif isinstance(error, anthropic.BadRequestError):
            return "The request was rejected as invalid."
        return describe_error(error)
