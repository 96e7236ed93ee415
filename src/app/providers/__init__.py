"""
AI Provider Abstraction.

모델 교체 가능하게 설계 (텍스트: Gemini/Claude, 이미지: Imagen).
모델명은 config만 SSOT.
"""

from .anthropic import ClaudeMenuParser
from .base import GenerationProvider, ImageGenerator, MenuParser
from .factory import build_generation_provider
from .gemini import GeminiMenuParser, ImagenGenerator

__all__ = [
    "MenuParser",
    "ImageGenerator",
    "GenerationProvider",
    "GeminiMenuParser",
    "ImagenGenerator",
    "ClaudeMenuParser",
    "build_generation_provider",
]
