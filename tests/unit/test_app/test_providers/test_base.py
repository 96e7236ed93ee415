"""
test_base.py - Provider 공용 헬퍼 테스트

테스트 케이스:
- 모델 JSON 응답 → Dish 목록 변환 (순서 유지, 이름 없는 항목 제외)
- ```json 블록 추출
- data URI 변환
- 프롬프트 생성 (스타일 조각 포함)
"""

import base64

import pytest

from src.app.providers.base import (
    GenerationProvider,
    ImageGenerator,
    MenuParser,
    describe_error,
    dishes_from_json,
    extract_json_block,
    to_data_uri,
)
from src.app.providers.prompts import build_image_prompt, build_menu_prompt
from src.domain.errors import ErrorCodes, ParseError
from src.domain.schemas import Dish, PhotoStyle

# =============================================================================
# dishes_from_json
# =============================================================================


class TestDishesFromJson:
    """모델 응답 → Dish 목록 변환 테스트."""

    def test_preserves_menu_order(self):
        """메뉴 순서대로 Dish 생성."""
        text = (
            '[{"dishName": "Soup", "description": "Hot"},'
            ' {"dishName": "Steak", "description": "Grilled"},'
            ' {"dishName": "Cake", "description": "Sweet"}]'
        )

        dishes = dishes_from_json(text)

        assert dishes == [
            Dish("Soup", "Hot"),
            Dish("Steak", "Grilled"),
            Dish("Cake", "Sweet"),
        ]

    def test_skips_items_without_name(self):
        """dishName이 없거나 비었거나 문자열이 아니면 제외."""
        text = (
            '[{"dishName": "", "description": "x"},'
            ' {"description": "no name"},'
            ' {"dishName": "   "},'
            ' {"dishName": 42},'
            ' "just a string",'
            ' {"dishName": "Tacos", "description": "Three"}]'
        )

        dishes = dishes_from_json(text)

        assert dishes == [Dish("Tacos", "Three")]

    def test_missing_description_becomes_empty(self):
        """description 누락/비문자열 → 빈 문자열."""
        text = '[{"dishName": "Bread"}, {"dishName": "Olives", "description": null}]'

        dishes = dishes_from_json(text)

        assert [d.description for d in dishes] == ["", ""]

    def test_strips_whitespace(self):
        dishes = dishes_from_json('[{"dishName": "  Ramen ", "description": " Pork broth "}]')

        assert dishes == [Dish("Ramen", "Pork broth")]

    def test_empty_array_means_no_dishes(self):
        assert dishes_from_json("[]") == []

    def test_non_array_json_means_no_dishes(self):
        """배열이 아닌 JSON → 빈 목록 (요리 없음으로 처리)."""
        assert dishes_from_json('{"dishName": "Soup"}') == []

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_response_raises(self, text):
        """빈 응답 → ParseError."""
        with pytest.raises(ParseError) as exc_info:
            dishes_from_json(text)

        assert exc_info.value.code == ErrorCodes.MALFORMED_RESPONSE

    def test_invalid_json_raises(self):
        """JSON 아님 → ParseError."""
        with pytest.raises(ParseError) as exc_info:
            dishes_from_json("Here are your dishes: Soup, Steak")

        assert exc_info.value.code == ErrorCodes.MALFORMED_RESPONSE

    def test_accepts_fenced_json(self):
        """```json 블록으로 감싼 응답 허용."""
        text = '```json\n[{"dishName": "Pho", "description": "Noodle soup"}]\n```'

        assert dishes_from_json(text) == [Dish("Pho", "Noodle soup")]

    def test_backticks_inside_valid_json_strings(self):
        """문자열 값 안의 ```는 펜스로 취급하지 않음."""
        text = (
            '[\n  {"dishName": "Code Cake", "description": "iced with ```"},\n'
            '  {"dishName": "Pie", "description": "a ``` b"}\n]'
        )

        dishes = dishes_from_json(text)

        assert [d.name for d in dishes] == ["Code Cake", "Pie"]
        assert dishes[0].description == "iced with ```"

    def test_fenced_json_with_backticks_in_strings(self):
        text = '```json\n[{"dishName": "Pie", "description": "a ``` b"}]\n```'

        assert dishes_from_json(text) == [Dish("Pie", "a ``` b")]

    def test_prose_around_fence_raises(self):
        """펜스로 시작하지 않는 비JSON 응답 → ParseError."""
        text = 'Sure!\n```json\n[{"dishName": "Pho"}]\n```'

        with pytest.raises(ParseError):
            dishes_from_json(text)


class TestExtractJsonBlock:
    """JSON 블록 추출 테스트."""

    def test_unfenced_text_returns_none(self):
        assert extract_json_block('  [1, 2]  ') is None

    def test_fence_without_language(self):
        assert extract_json_block("```\n[1]\n```") == "[1]"

    def test_fence_with_language(self):
        assert extract_json_block('```json\n["a ``` b"]\n```') == '["a ``` b"]'


# =============================================================================
# Misc helpers
# =============================================================================


class TestHelpers:
    """기타 헬퍼 테스트."""

    def test_to_data_uri(self):
        data_uri = to_data_uri(b"\xff\xd8jpeg", "image/jpeg")

        prefix, encoded = data_uri.split(",", 1)
        assert prefix == "data:image/jpeg;base64"
        assert base64.b64decode(encoded) == b"\xff\xd8jpeg"

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("invalid api_key", "Check the API key configuration."),
            ("quota exceeded", "API quota exceeded. Try again later."),
            ("read timeout", "The request timed out."),
            ("connection reset", "Network connection error."),
        ],
    )
    def test_describe_error(self, message, expected):
        assert describe_error(RuntimeError(message)) == expected

    def test_describe_error_falls_back_to_type_name(self):
        assert describe_error(RuntimeError()) == "RuntimeError"


# =============================================================================
# Prompts
# =============================================================================


class TestPrompts:
    """프롬프트 생성 테스트."""

    def test_menu_prompt_contains_menu_text(self):
        prompt = build_menu_prompt("Soup - hot {not a placeholder}")

        assert "Soup - hot {not a placeholder}" in prompt
        assert "dishName" in prompt

    def test_menu_prompt_json_suffix(self):
        assert "JSON array only" in build_menu_prompt("Soup", json_suffix=True)
        assert "JSON array only" not in build_menu_prompt("Soup")

    @pytest.mark.parametrize("style", list(PhotoStyle))
    def test_image_prompt_includes_dish_and_style(self, style):
        dish = Dish("Paella", "Saffron rice with seafood")

        prompt = build_image_prompt(dish, style)

        assert "Paella" in prompt
        assert "Saffron rice with seafood" in prompt
        assert style.option.prompt in prompt

    def test_style_prompts_differ(self):
        dish = Dish("Paella")

        prompts = {build_image_prompt(dish, style) for style in PhotoStyle}

        assert len(prompts) == len(PhotoStyle)


# =============================================================================
# GenerationProvider
# =============================================================================


class FakeParser(MenuParser):
    model = "fake-text"

    async def parse_menu(self, menu_text):
        return [Dish(menu_text.strip())]


class FakeImages(ImageGenerator):
    model = "fake-image"

    async def generate_image(self, dish, style):
        return f"data:image/png;base64,{dish.name}-{style.value}"


class TestGenerationProvider:
    """GenerationProvider 위임 테스트."""

    @pytest.mark.asyncio
    async def test_delegates_to_parser_and_generator(self):
        provider = GenerationProvider(FakeParser(), FakeImages())

        dishes = await provider.parse_menu(" Gnocchi ")
        image_ref = await provider.generate_image(dishes[0], PhotoStyle.RUSTIC)

        assert dishes == [Dish("Gnocchi")]
        assert image_ref == "data:image/png;base64,Gnocchi-rustic"

    def test_describe(self):
        provider = GenerationProvider(FakeParser(), FakeImages())

        assert provider.describe() == {
            "menu_parser": "FakeParser",
            "menu_model": "fake-text",
            "image_generator": "FakeImages",
            "image_model": "fake-image",
        }

    def test_abstract_parser_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            MenuParser()  # type: ignore[abstract]
