"""설정값으로 AIProvider 고르기"""

from typing import Optional

from src.config import settings
from src.core.logging import get_logger
from src.services.ai.base import AIProvider
from src.services.ai.gemini import DEFAULT_GEMINI_MODEL, GeminiProvider
from src.services.ai.mock import MockProvider

logger = get_logger(__name__)

SUPPORTED_PROVIDERS = ("mock", "gemini")


def get_ai_provider(
    provider_name: Optional[str] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> AIProvider:
    """AIProvider 생성. 인자가 없으면 AI_PROVIDER / AI_API_KEY / AI_MODEL 설정을 쓴다.

    키가 없거나 모르는 이름이면 MockProvider로 대체하고 경고를 남긴다.
    """
    name = (provider_name or settings.AI_PROVIDER or "mock").lower()
    if name not in SUPPORTED_PROVIDERS:
        logger.warning("Unknown AI provider '%s', using mock", name)
        return MockProvider()

    if name == "gemini":
        key = api_key or settings.AI_API_KEY
        if not key:
            logger.warning("AI_API_KEY not set, using mock instead of gemini")
            return MockProvider()
        model_name = model or settings.AI_MODEL or DEFAULT_GEMINI_MODEL
        logger.debug("Using GeminiProvider (%s)", model_name)
        return GeminiProvider(api_key=key, model=model_name)

    logger.debug("Using MockProvider")
    return MockProvider()
