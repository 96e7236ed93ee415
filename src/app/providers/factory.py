"""
Provider 생성: config → GenerationProvider.

모델명은 config만 SSOT. 코드 기본값은 config 누락 시에만 사용.
"""

import logging
from typing import Any

from src.domain.constants import (
    DEFAULT_CLAUDE_TEXT_MODEL,
    DEFAULT_GEMINI_TEXT_MODEL,
    DEFAULT_IMAGE_ASPECT_RATIO,
    DEFAULT_IMAGE_MIME_TYPE,
    DEFAULT_IMAGE_MODEL,
)
from src.domain.errors import ErrorCodes, ProviderConfigError

from .anthropic import ClaudeMenuParser
from .base import GenerationProvider, MenuParser
from .gemini import GeminiMenuParser, ImagenGenerator

logger = logging.getLogger(__name__)

MENU_PARSER_PROVIDERS = ("gemini", "anthropic")


def build_menu_parser(config: dict[str, Any]) -> MenuParser:
    """ai.menu_parser 설정으로 메뉴 파서 생성."""
    parser_config = config.get("ai", {}).get("menu_parser", {}) or {}
    provider_name = parser_config.get("provider", "gemini")

    if provider_name == "gemini":
        return GeminiMenuParser(
            model=parser_config.get("model") or DEFAULT_GEMINI_TEXT_MODEL,
        )
    if provider_name == "anthropic":
        return ClaudeMenuParser(
            model=parser_config.get("model") or DEFAULT_CLAUDE_TEXT_MODEL,
            temperature=parser_config.get("temperature"),
        )

    raise ProviderConfigError(
        ErrorCodes.UNKNOWN_PROVIDER,
        f"Unknown menu parser provider: {provider_name!r}",
        allowed=list(MENU_PARSER_PROVIDERS),
    )


def build_generation_provider(config: dict[str, Any]) -> GenerationProvider:
    """
    config 기반 GenerationProvider 생성.

    Args:
        config: default.yaml 내용 (ai 섹션 사용)

    Raises:
        ProviderConfigError: 알 수 없는 provider 또는 API 키 누락(anthropic)
    """
    image_config = config.get("ai", {}).get("image", {}) or {}

    provider = GenerationProvider(
        menu_parser=build_menu_parser(config),
        image_generator=ImagenGenerator(
            model=image_config.get("model") or DEFAULT_IMAGE_MODEL,
            output_mime_type=image_config.get("output_mime_type") or DEFAULT_IMAGE_MIME_TYPE,
            aspect_ratio=image_config.get("aspect_ratio") or DEFAULT_IMAGE_ASPECT_RATIO,
        ),
    )
    logger.info(f"Generation provider ready: {provider.describe()}")
    return provider
