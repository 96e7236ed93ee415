"""
Google Gemini / Imagen Provider.

- GeminiMenuParser: Gemini 텍스트 모델 + JSON response schema로 메뉴 파싱
- ImagenGenerator: Imagen 이미지 모델로 요리 사진 생성 (data URI 반환)

호출은 1회만 (재시도/fallback 모델 없음).
API 오류는 ParseError / ImageGenError로 변환하여 전파.
"""

import logging
import os
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.domain.constants import (
    DEFAULT_GEMINI_TEXT_MODEL,
    DEFAULT_IMAGE_ASPECT_RATIO,
    DEFAULT_IMAGE_MIME_TYPE,
    DEFAULT_IMAGE_MODEL,
)
from src.domain.errors import ErrorCodes, ImageGenError, ParseError, ProviderConfigError
from src.domain.schemas import Dish, PhotoStyle

from .base import ImageGenerator, MenuParser, describe_error, dishes_from_json, to_data_uri
from .prompts import build_image_prompt, build_menu_prompt

logger = logging.getLogger(__name__)

# 메뉴 응답 스키마: [{dishName, description}]
MENU_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "dishName": types.Schema(
                type=types.Type.STRING,
                description="The name of the dish.",
            ),
            "description": types.Schema(
                type=types.Type.STRING,
                description="A brief description of the dish.",
            ),
        },
        required=["dishName", "description"],
    ),
)


def resolve_google_api_key(api_key: str | None = None) -> str | None:
    """API 키 결정: 인자 > GOOGLE_API_KEY > GEMINI_API_KEY."""
    return (
        api_key
        or os.environ.get("GOOGLE_API_KEY")
        or os.environ.get("GEMINI_API_KEY")
    )


def get_user_friendly_error_message(error: Exception) -> str:
    """google-genai 예외 → 사람이 읽을 수 있는 설명."""
    if isinstance(error, genai_errors.APIError):
        code = getattr(error, "code", None)
        if code in (401, 403):
            return "Google API authentication failed. Check GOOGLE_API_KEY."
        elif code == 429:
            return "Google API quota exceeded. Try again later."
        elif code == 404:
            return "The requested model was not found."
        elif code == 400:
            return "The request was rejected as invalid."
        elif isinstance(error, genai_errors.ServerError):
            return "Google API is temporarily unavailable."
    return describe_error(error)


class _GoogleClientMixin:
    """google-genai 클라이언트 lazy init 공용."""

    api_key: str | None
    _client: Any

    def _get_client(self) -> Any:
        """Gemini 클라이언트 (lazy init)."""
        if self._client is None:
            if not self.api_key:
                raise ProviderConfigError(
                    ErrorCodes.API_KEY_MISSING,
                    "Google API key is missing. Set GOOGLE_API_KEY or GEMINI_API_KEY.",
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client


class GeminiMenuParser(_GoogleClientMixin, MenuParser):
    """
    Gemini 메뉴 파서.

    Usage:
        parser = GeminiMenuParser(model="gemini-2.5-flash")
        dishes = await parser.parse_menu(menu_text)
    """

    def __init__(
        self,
        model: str = DEFAULT_GEMINI_TEXT_MODEL,
        api_key: str | None = None,
    ):
        """
        Args:
            model: 텍스트 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 GOOGLE_API_KEY 사용 가능)
        """
        self.model = model
        self.api_key = resolve_google_api_key(api_key)
        self._client: Any = None

    async def parse_menu(self, menu_text: str) -> list[Dish]:
        """
        메뉴 텍스트 → Dish 목록.

        JSON mode + response schema로 구조 강제.
        """
        prompt = build_menu_prompt(menu_text)

        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=MENU_RESPONSE_SCHEMA,
                ),
            )
        except ProviderConfigError:
            raise
        except Exception as e:
            logger.error(f"Menu parsing request failed ({self.model}): {e}", exc_info=True)
            raise ParseError(
                ErrorCodes.MENU_PARSE_FAILED,
                get_user_friendly_error_message(e),
                model=self.model,
            ) from e

        dishes = dishes_from_json(response.text)
        logger.info(f"Parsed {len(dishes)} dishes with {self.model}")
        return dishes


class ImagenGenerator(_GoogleClientMixin, ImageGenerator):
    """
    Imagen 요리 사진 생성기.

    Usage:
        generator = ImagenGenerator(model="imagen-4.0-generate-001")
        data_uri = await generator.generate_image(dish, PhotoStyle.RUSTIC)
    """

    def __init__(
        self,
        model: str = DEFAULT_IMAGE_MODEL,
        api_key: str | None = None,
        output_mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
        aspect_ratio: str = DEFAULT_IMAGE_ASPECT_RATIO,
    ):
        """
        Args:
            model: 이미지 모델 ID (config에서 주입)
            api_key: API 키 (환경변수 GOOGLE_API_KEY 사용 가능)
            output_mime_type: 출력 이미지 MIME 타입
            aspect_ratio: 가로세로 비율
        """
        self.model = model
        self.api_key = resolve_google_api_key(api_key)
        self.output_mime_type = output_mime_type
        self.aspect_ratio = aspect_ratio
        self._client: Any = None

    async def generate_image(self, dish: Dish, style: PhotoStyle) -> str:
        """요리 1개 사진 생성 → data URI."""
        prompt = build_image_prompt(dish, style)

        try:
            response = await self._get_client().aio.models.generate_images(
                model=self.model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=self.output_mime_type,
                    aspect_ratio=self.aspect_ratio,
                ),
            )
        except ProviderConfigError:
            raise
        except Exception as e:
            logger.error(
                f"Image generation failed for {dish.name!r} ({self.model}): {e}",
                exc_info=True,
            )
            raise ImageGenError(
                ErrorCodes.IMAGE_GEN_FAILED,
                get_user_friendly_error_message(e),
                model=self.model,
                dish=dish.name,
            ) from e

        image_bytes = self._first_image_bytes(response)
        if not image_bytes:
            raise ImageGenError(
                ErrorCodes.NO_IMAGES_RETURNED,
                "Image generation failed or returned no images.",
                model=self.model,
                dish=dish.name,
            )
        return to_data_uri(image_bytes, self.output_mime_type)

    def _first_image_bytes(self, response: Any) -> bytes | None:
        """응답에서 첫 번째 이미지 바이트 추출 (없으면 None)."""
        generated = getattr(response, "generated_images", None) or []
        if not generated:
            return None
        image = getattr(generated[0], "image", None)
        if image is None:
            return None
        image_bytes: bytes | None = getattr(image, "image_bytes", None)
        return image_bytes
