"""
Provider 프롬프트 템플릿.

텍스트 모델(메뉴 파싱)과 이미지 모델(요리 사진) 공용.
프롬프트 변경 시 PROMPT_TEMPLATE_VERSION 업데이트.
"""

from src.domain.schemas import Dish, PhotoStyle

PROMPT_TEMPLATE_VERSION = "1.0.0"

MENU_PARSE_PROMPT = (
    "Parse the following restaurant menu text into a JSON array of objects. "
    'Each object must have a "dishName" (string) and a "description" (string). '
    "Only include main dishes, appetizers, and entrees. "
    "Ignore drinks, sides, and categories. "
    "If a description is not present for a dish, use an empty string. "
    "Keep the dishes in the order they appear on the menu. "
    "Here is the menu:\n\n{menu_text}"
)

# Claude는 response schema 강제가 없으므로 응답 형식을 명시
MENU_PARSE_JSON_SUFFIX = (
    "\n\nRespond with the JSON array only, for example:\n"
    '[{"dishName": "Margherita Pizza", "description": "Tomato, mozzarella, basil."}]'
)

IMAGE_PROMPT_TEMPLATE = (
    'Professional food photography of "{name}", described as "{description}". '
    "The style must be: {style_prompt}. "
    "Hyperrealistic, high detail, 8k, delicious looking, studio quality."
)


def build_menu_prompt(menu_text: str, json_suffix: bool = False) -> str:
    """메뉴 파싱 프롬프트."""
    prompt = MENU_PARSE_PROMPT.format(menu_text=menu_text)
    if json_suffix:
        prompt += MENU_PARSE_JSON_SUFFIX
    return prompt


def build_image_prompt(dish: Dish, style: PhotoStyle) -> str:
    """요리 사진 프롬프트 (요리명 + 설명 + 스타일 조각)."""
    return IMAGE_PROMPT_TEMPLATE.format(
        name=dish.name,
        description=dish.description,
        style_prompt=style.option.prompt,
    )
