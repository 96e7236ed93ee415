"""
Domain Constants: 메뉴 사진 생성 전역 상수.

스타일 카탈로그, 사용자 메시지, 기본 모델 등 시스템 전반에서 사용되는 값들.
"""

from dataclasses import dataclass

# =============================================================================
# Photo Styles (사진 스타일 카탈로그)
# =============================================================================
# UI 스타일 선택지는 정확히 3개 (rustic, modern, social).
# prompt는 이미지 모델 프롬프트에 그대로 삽입됨.


@dataclass(frozen=True)
class StyleOption:
    """스타일 선택지 (UI 표시 + 프롬프트 조각)."""
    id: str
    name: str
    description: str
    prompt: str


STYLE_OPTIONS: tuple[StyleOption, ...] = (
    StyleOption(
        id="modern",
        name="Bright & Modern",
        description="Clean, airy, with soft natural light.",
        prompt=(
            "bright and airy aesthetic, minimalist white plate, clean modern "
            "background, soft natural light, shallow depth of field"
        ),
    ),
    StyleOption(
        id="rustic",
        name="Rustic & Dark",
        description="Moody, dramatic lighting on dark surfaces.",
        prompt=(
            "dark and moody aesthetic, rustic wooden table background, dramatic "
            "side lighting, deep shadows, rich textures"
        ),
    ),
    StyleOption(
        id="social",
        name="Social Media",
        description="Vibrant, top-down flat lay style shots.",
        prompt=(
            "vibrant top-down flat lay, popular on social media, on a stylish "
            "marble or slate surface, with complementary garnishes arranged neatly"
        ),
    ),
)

STYLE_BY_ID: dict[str, StyleOption] = {option.id: option for option in STYLE_OPTIONS}

DEFAULT_STYLE_ID = "modern"

# =============================================================================
# User-facing Messages (사용자 메시지)
# =============================================================================
# 세션 단위 에러 메시지는 서로 구분되어야 함 (빈 입력 ≠ 파싱 실패 ≠ 요리 없음).

EMPTY_INPUT_MESSAGE = "Please enter a menu first."
PARSE_FAILED_MESSAGE = (
    "The menu could not be understood. "
    "Please try reformatting it (e.g., 'Dish Name - Description')."
)
NO_DISHES_MESSAGE = "No dishes identified in the menu. Please check the format."
IMAGE_FAILED_MESSAGE = "Image creation failed"
RUN_IN_PROGRESS_MESSAGE = "Photos are still being generated. Please wait for them to finish."
SESSION_EXPIRED_MESSAGE = "This session has expired. Reload the page to start again."

# =============================================================================
# Default Models (config에서 오버라이드 가능)
# =============================================================================

DEFAULT_GEMINI_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_CLAUDE_TEXT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
DEFAULT_IMAGE_ASPECT_RATIO = "1:1"

# =============================================================================
# ID Prefixes
# =============================================================================

RUN_ID_PREFIX = "RUN-"
SESSION_ID_PREFIX = "SES-"

# =============================================================================
# Sample Menu (첫 화면 기본 입력)
# =============================================================================

SAMPLE_MENU_TEXT = (
    "Spaghetti Carbonara - Creamy pasta with pancetta, pecorino cheese, and black pepper.\n"
    "Margherita Pizza - Classic pizza with tomato, mozzarella, and fresh basil.\n"
    "Grilled Salmon - Salmon fillet served with asparagus and lemon butter sauce."
)
