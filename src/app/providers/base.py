"""
AI Provider 추상 인터페이스.

- MenuParser: 메뉴 텍스트 → Dish 목록 (텍스트 모델)
- ImageGenerator: Dish + 스타일 → 이미지 참조 (이미지 모델)
- GenerationProvider: 두 provider를 묶어 컨트롤러에 제공

Provider 호출은 항상 1회 (재시도/fallback 없음).
컨트롤러 상태에는 부작용 없음.
"""

import base64
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from src.domain.errors import ErrorCodes, ParseError
from src.domain.schemas import Dish, PhotoStyle

logger = logging.getLogger(__name__)


# =============================================================================
# Response Helpers
# =============================================================================

def extract_json_block(response_text: str) -> str | None:
    """
    ```json ... ``` 블록 안쪽 추출.

    텍스트가 펜스로 시작하지 않으면 None (문자열 값 안의 ```는 건드리지 않음).
    """
    text = response_text.strip()
    if not text.startswith("```"):
        return None
    start = text.find("\n")
    end = text.rfind("```")
    if start == -1 or end <= start:
        return None
    return text[start + 1:end].strip()


def dishes_from_json(response_text: str | None) -> list[Dish]:
    """
    모델 응답(JSON 배열)을 Dish 목록으로 변환.

    - 메뉴 순서 유지
    - dishName이 비었거나 문자열이 아닌 항목은 제외
    - description이 문자열이 아니면 빈 문자열
    - JSON이지만 배열이 아니면 빈 목록 (→ 요리 없음)

    Raises:
        ParseError: 응답이 비었거나 JSON이 아님
    """
    if not response_text or not response_text.strip():
        raise ParseError(ErrorCodes.MALFORMED_RESPONSE, "Empty response from model")

    try:
        data = json.loads(response_text.strip())
    except json.JSONDecodeError as e:
        fenced = extract_json_block(response_text)
        if fenced is None:
            logger.error(f"Failed to parse JSON response from model: {response_text!r}")
            raise ParseError(
                ErrorCodes.MALFORMED_RESPONSE,
                f"Could not parse menu data: {e}",
            ) from e
        try:
            data = json.loads(fenced)
        except json.JSONDecodeError as fenced_error:
            logger.error(f"Failed to parse fenced JSON response from model: {response_text!r}")
            raise ParseError(
                ErrorCodes.MALFORMED_RESPONSE,
                f"Could not parse menu data: {fenced_error}",
            ) from fenced_error

    if not isinstance(data, list):
        logger.warning(f"Model returned {type(data).__name__} instead of a list")
        return []

    dishes = []
    for item in data:
        if not isinstance(item, dict):
            continue
        name = item.get("dishName")
        if not isinstance(name, str) or not name.strip():
            continue
        description = item.get("description")
        dishes.append(
            Dish(
                name=name.strip(),
                description=description.strip() if isinstance(description, str) else "",
            )
        )
    return dishes


def to_data_uri(image_bytes: bytes, mime_type: str) -> str:
    """이미지 바이트 → data URI."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def describe_error(error: Exception) -> str:
    """
    예외 문자열 기반 기본 설명 (provider별 매핑에서 못 잡은 경우).
    """
    error_str = str(error)
    lowered = error_str.lower()
    if "api_key" in lowered or "api key" in lowered:
        return "Check the API key configuration."
    elif "quota" in lowered or "limit" in lowered:
        return "API quota exceeded. Try again later."
    elif "timeout" in lowered:
        return "The request timed out."
    elif "connection" in lowered:
        return "Network connection error."
    return error_str or type(error).__name__


# =============================================================================
# Abstract Providers
# =============================================================================

class MenuParser(ABC):
    """
    메뉴 파서 추상 인터페이스.

    역할: 자유 형식 메뉴 텍스트 → 구조화된 요리 목록
    """

    @abstractmethod
    async def parse_menu(self, menu_text: str) -> list[Dish]:
        """
        메뉴 텍스트 파싱.

        Args:
            menu_text: 사용자가 붙여넣은 메뉴 텍스트

        Returns:
            메뉴 순서대로의 Dish 목록 (이름 없는 항목 제외)

        Raises:
            ParseError: 전송 실패 또는 응답 형식 오류
        """
        ...


class ImageGenerator(ABC):
    """
    이미지 생성 추상 인터페이스.

    역할: 요리 1개 + 스타일 → 이미지 참조 (data URI 또는 URL)
    """

    @abstractmethod
    async def generate_image(self, dish: Dish, style: PhotoStyle) -> str:
        """
        요리 사진 생성.

        Raises:
            ImageGenError: 이미지 0개 반환 또는 전송 실패
        """
        ...


class GenerationProvider:
    """
    컨트롤러가 사용하는 provider 묶음.

    Usage:
        provider = GenerationProvider(GeminiMenuParser(), ImagenGenerator())
        dishes = await provider.parse_menu(text)
        image_ref = await provider.generate_image(dishes[0], PhotoStyle.MODERN)
    """

    def __init__(self, menu_parser: MenuParser, image_generator: ImageGenerator):
        self.menu_parser = menu_parser
        self.image_generator = image_generator

    async def parse_menu(self, menu_text: str) -> list[Dish]:
        return await self.menu_parser.parse_menu(menu_text)

    async def generate_image(self, dish: Dish, style: PhotoStyle) -> str:
        return await self.image_generator.generate_image(dish, style)

    def describe(self) -> dict[str, Any]:
        """헬스/디버그용 provider 정보."""
        return {
            "menu_parser": type(self.menu_parser).__name__,
            "menu_model": getattr(self.menu_parser, "model", None),
            "image_generator": type(self.image_generator).__name__,
            "image_model": getattr(self.image_generator, "model", None),
        }
