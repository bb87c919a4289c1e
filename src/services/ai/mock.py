"""Mock AI provider for testing and local runs without an API key."""

import json
from typing import Optional

from src.services.ai.base import AIProvider
from src.services.scenario_types import SCENARIO_MARKER

MOCK_CHOICES = [
    {"id": "1", "text": "그때 제 표정은 어땠을까요?", "icon": "🎬"},
    {"id": "2", "text": "그 장면의 배경음악을 골라 주세요", "icon": "💭"},
    {"id": "3", "text": "다른 인물의 시선으로도 볼 수 있을까요?", "icon": "✨"},
]

MOCK_SCENARIO = (
    "S#1. 새벽의 골목 - 주인공이 천천히 걸어 나온다.\n"
    "S#2. 그날의 기억 - 멈춰 선 시간 속에서 그는 처음으로 웃는다."
)


class MockProvider(AIProvider):
    """Mock AI provider that returns a fixed director reply as JSON."""

    @property
    def name(self) -> str:
        """Return the provider name."""
        return "mock"

    def is_available(self) -> bool:
        """Check if the provider is available."""
        return True

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 1000,
        expect_json: bool = False,
    ) -> str:
        """Generate mock director reply.

        Adds a "scenario" field when the prompt asks for one.
        """
        payload: dict = {
            "message": "[Mock] 흥미로운 장면이네요. 조금 더 들려주시겠어요? 🎬",
            "choices": MOCK_CHOICES,
        }
        if SCENARIO_MARKER in prompt:
            payload["scenario"] = MOCK_SCENARIO
        return json.dumps(payload, ensure_ascii=False)
