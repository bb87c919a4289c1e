"""ScenarioGenerator 테스트"""

import json
from unittest.mock import MagicMock

import pytest

from src.core.conversation.errors import DecodeError, GenerationError
from src.core.conversation.models import EmotionTag
from src.core.conversation.personas import DirectorPersona
from src.core.conversation.stages import Stage
from src.services.ai import MockProvider
from src.services.scenario_generator import ScenarioGenerator
from src.services.scenario_types import GeneratorRequest


def _request(stage: Stage = Stage.DETAIL_1) -> GeneratorRequest:
    return GeneratorRequest(
        persona=DirectorPersona.MIYAZAKI,
        vignette="숲길 산책",
        emotion=EmotionTag.PLEASURE,
        stage=stage,
    )


class TestScenarioGenerator:
    def test_mock_provider_reply(self):
        reply = ScenarioGenerator(MockProvider()).generate(_request())
        assert reply.message.startswith("[Mock]")
        assert len(reply.to_choices()) == 3
        assert reply.scenario_text is None

    def test_mock_provider_draft_has_scenario(self):
        reply = ScenarioGenerator(MockProvider()).generate(_request(Stage.DRAFT))
        assert reply.scenario_text.startswith("S#1.")

    def test_passes_built_prompt_to_provider(self):
        provider = MagicMock()
        provider.is_available.return_value = True
        provider.generate.return_value = json.dumps({"message": "네"})

        ScenarioGenerator(provider).generate(_request(Stage.FINAL))

        kwargs = provider.generate.call_args.kwargs
        assert "미야자키" in kwargs["system_prompt"]
        assert kwargs["expect_json"] is True
        assert kwargs["max_tokens"] == 2048

    def test_unavailable_provider_raises(self):
        provider = MagicMock()
        provider.is_available.return_value = False
        with pytest.raises(GenerationError):
            ScenarioGenerator(provider).generate(_request())
        provider.generate.assert_not_called()

    def test_provider_exception_wrapped(self):
        provider = MagicMock()
        provider.is_available.return_value = True
        provider.generate.side_effect = RuntimeError("Gemini API error: 503")
        with pytest.raises(GenerationError, match="503"):
            ScenarioGenerator(provider).generate(_request())

    def test_malformed_reply_raises_decode_error(self):
        provider = MagicMock()
        provider.is_available.return_value = True
        provider.generate.return_value = '{"choices": []}'
        with pytest.raises(DecodeError):
            ScenarioGenerator(provider).generate(_request())
