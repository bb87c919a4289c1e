"""Tests for AI provider module."""

import json
from unittest.mock import MagicMock, patch

import pytest

from src.services.ai import AIProvider, GeminiProvider, MockProvider, get_ai_provider
from src.services.scenario_types import SCENARIO_MARKER


class TestMockProvider:
    """Tests for MockProvider class."""

    def test_mock_provider_name(self):
        provider = MockProvider()
        assert provider.name == "mock"
        assert provider.is_available() is True

    def test_mock_reply_is_director_json(self):
        """Mock reply decodes to a message with exactly three choices."""
        payload = json.loads(MockProvider().generate("test prompt"))

        assert payload["message"].startswith("[Mock]")
        assert len(payload["choices"]) == 3
        assert "scenario" not in payload

    def test_mock_adds_scenario_when_asked(self):
        payload = json.loads(MockProvider().generate(f"{SCENARIO_MARKER} 시나리오"))
        assert payload["scenario"].startswith("S#1.")


class TestGeminiProvider:
    """Tests for GeminiProvider class."""

    @patch("src.services.ai.gemini.genai")
    def test_gemini_provider_name(self, mock_genai: MagicMock):
        provider = GeminiProvider(api_key="test_key")
        assert provider.name == "gemini"

    @patch("src.services.ai.gemini.genai")
    def test_gemini_provider_not_available_without_key(self, mock_genai: MagicMock):
        provider = GeminiProvider(api_key="")
        assert provider.is_available() is False
        with pytest.raises(RuntimeError):
            provider.generate("hello")

    @patch("src.services.ai.gemini.genai")
    def test_gemini_requests_json_mime_type(self, mock_genai: MagicMock):
        """expect_json asks Gemini for an application/json body."""
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.return_value.text = '  {"message": "hi"}  '
        provider = GeminiProvider(api_key="test_key")

        result = provider.generate("prompt", system_prompt="sys", expect_json=True)

        assert result == '{"message": "hi"}'
        config_kwargs = mock_genai.types.GenerationConfig.call_args.kwargs
        assert config_kwargs["response_mime_type"] == "application/json"
        mock_genai.GenerativeModel.assert_called_with(
            "gemini-1.5-flash", system_instruction="sys"
        )

    @patch("src.services.ai.gemini.genai")
    def test_gemini_api_error_becomes_runtime_error(self, mock_genai: MagicMock):
        model = mock_genai.GenerativeModel.return_value
        model.generate_content.side_effect = ConnectionError("timeout")
        provider = GeminiProvider(api_key="test_key")

        with pytest.raises(RuntimeError, match="Gemini API error"):
            provider.generate("prompt")


class TestAIProviderFactory:
    """Tests for AI provider factory."""

    def test_factory_returns_mock_by_default(self):
        provider = get_ai_provider()

        assert isinstance(provider, AIProvider)
        assert isinstance(provider, MockProvider)

    @patch("src.services.ai.factory.settings")
    @patch("src.services.ai.gemini.genai")
    def test_factory_returns_gemini_with_config(
        self, mock_genai: MagicMock, mock_settings: MagicMock
    ):
        mock_settings.AI_PROVIDER = "gemini"
        mock_settings.AI_API_KEY = "test_key"
        mock_settings.AI_MODEL = "gemini-2.0-flash"

        provider = get_ai_provider()

        assert isinstance(provider, GeminiProvider)

    @patch("src.services.ai.factory.settings")
    def test_factory_fallback_without_key(self, mock_settings: MagicMock):
        mock_settings.AI_PROVIDER = "gemini"
        mock_settings.AI_API_KEY = None

        assert isinstance(get_ai_provider(), MockProvider)

    def test_factory_unknown_provider_falls_back(self):
        assert isinstance(get_ai_provider("openai-ish"), MockProvider)

    @patch("src.services.ai.gemini.genai")
    def test_factory_explicit_arguments_override_settings(self, mock_genai: MagicMock):
        provider = get_ai_provider("Gemini", api_key="direct_key", model="gemini-x")

        assert isinstance(provider, GeminiProvider)
        mock_genai.configure.assert_called_once_with(api_key="direct_key")
