"""
test_errors.py - 도메인 에러 테스트
"""

import pytest

from src.domain.constants import (
    EMPTY_INPUT_MESSAGE,
    IMAGE_FAILED_MESSAGE,
    NO_DISHES_MESSAGE,
    PARSE_FAILED_MESSAGE,
)
from src.domain.errors import (
    EmptyInputError,
    EmptyResultError,
    ErrorCodes,
    GenerationError,
    ImageGenError,
    ParseError,
    ProviderConfigError,
    RunInProgressError,
)


class TestGenerationError:
    """에러 베이스 동작 테스트."""

    def test_str_includes_code_message_and_context(self):
        error = ParseError(ErrorCodes.MALFORMED_RESPONSE, "invalid JSON", model="m")

        assert str(error) == "[MALFORMED_RESPONSE] invalid JSON (model='m')"

    def test_default_code_and_message(self):
        error = EmptyResultError()

        assert error.code == ErrorCodes.NO_DISHES_FOUND
        assert error.message == NO_DISHES_MESSAGE

    def test_to_dict(self):
        error = ImageGenError(ErrorCodes.NO_IMAGES_RETURNED, "no images", dish="Soup")

        assert error.to_dict() == {
            "code": "NO_IMAGES_RETURNED",
            "message": "no images",
            "dish": "Soup",
        }

    @pytest.mark.parametrize(
        "cls,user_message",
        [
            (EmptyInputError, EMPTY_INPUT_MESSAGE),
            (ParseError, PARSE_FAILED_MESSAGE),
            (EmptyResultError, NO_DISHES_MESSAGE),
            (ImageGenError, IMAGE_FAILED_MESSAGE),
        ],
    )
    def test_user_message_independent_of_technical_message(self, cls, user_message):
        error = cls(message="stack trace details")

        assert error.user_message == user_message
        assert isinstance(error, GenerationError)

    @pytest.mark.parametrize(
        "cls,code",
        [
            (EmptyInputError, ErrorCodes.EMPTY_INPUT),
            (ParseError, ErrorCodes.MENU_PARSE_FAILED),
            (RunInProgressError, ErrorCodes.RUN_IN_PROGRESS),
            (ProviderConfigError, ErrorCodes.API_KEY_MISSING),
        ],
    )
    def test_default_codes(self, cls, code):
        assert cls().code == code
