"""AI provider module (director reply backends)."""

from src.services.ai.base import AIProvider
from src.services.ai.factory import get_ai_provider
from src.services.ai.gemini import DEFAULT_GEMINI_MODEL, GeminiProvider
from src.services.ai.mock import MockProvider

__all__ = [
    "AIProvider",
    "DEFAULT_GEMINI_MODEL",
    "GeminiProvider",
    "MockProvider",
    "get_ai_provider",
]
