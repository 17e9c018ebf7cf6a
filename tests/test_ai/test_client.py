"""Tests for the model client: model factory, key checks and completions."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from niche.ai.client import (
    ChatMessage,
    generate_response,
    get_model_from_config,
    is_api_key_configured,
)
from niche.ai.errors import AIErrorType, AIServiceError
from niche.config.models import ModelConfig
from niche.config.settings import Settings


@pytest.fixture(autouse=True)
def _no_env_file():
    with patch("niche.ai.client.load_env"):
        yield


def _settings(provider: str = "openai") -> Settings:
    return Settings(model=ModelConfig(provider=provider, model_id="light", heavy_model_id="heavy"))


class TestGetModel:
    def test_openrouter_uses_openai_chat(self):
        mock_cls = MagicMock(return_value=MagicMock())

        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "or-test-key"}):
            with patch.dict(
                "sys.modules",
                {"agno.models.openai": MagicMock(OpenAIChat=mock_cls)},
            ):
                get_model_from_config("openrouter", "anthropic/claude-sonnet-4-5", temperature=0.3)
                mock_cls.assert_called_once_with(
                    id="anthropic/claude-sonnet-4-5",
                    api_key="or-test-key",
                    base_url="https://openrouter.ai/api/v1",
                    temperature=0.3,
                    max_tokens=None,
                )

    def test_ollama_passes_temperature_as_option(self):
        mock_cls = MagicMock(return_value=MagicMock())
        with patch.dict("sys.modules", {"agno.models.ollama": MagicMock(Ollama=mock_cls)}):
            get_model_from_config("ollama", "llama3.1", temperature=0.2)
        mock_cls.assert_called_once_with(id="llama3.1", options={"temperature": 0.2})

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown model provider"):
            get_model_from_config("totally_unknown", "x")


class TestApiKeyConfigured:
    def test_local_provider_needs_no_key(self):
        assert is_api_key_configured("ollama") is True

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert is_api_key_configured("openai") is False

    def test_placeholder_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "your_openai_api_key_here")
        assert is_api_key_configured("openai") is False

    def test_real_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert is_api_key_configured("openai") is True


class TestGenerateResponse:
    @pytest.mark.asyncio
    async def test_missing_key_raises_invalid_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(AIServiceError) as exc_info:
            await generate_response([ChatMessage(role="user", content="hi")], _settings())
        assert exc_info.value.kind == AIErrorType.INVALID_KEY

    @pytest.mark.asyncio
    async def test_runs_agent_with_system_as_instructions(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        response = MagicMock(content="Hello!", status="COMPLETED")
        response.metrics = MagicMock(input_tokens=12, output_tokens=3, total_tokens=15)
        agent_cls = MagicMock()
        agent_cls.return_value.arun = AsyncMock(return_value=response)
        messages = [
            ChatMessage(role="system", content="Be brief."),
            ChatMessage(role="user", content="Hi"),
        ]

        with (
            patch("niche.ai.client.get_model_from_config") as mock_model,
            patch("agno.agent.Agent", agent_cls),
        ):
            result = await generate_response(messages, _settings(), heavy=True, temperature=0.2)

        assert result.content == "Hello!"
        assert result.total_tokens == 15
        assert mock_model.call_args.args[:2] == ("openai", "heavy")
        assert mock_model.call_args.kwargs["temperature"] == 0.2
        assert agent_cls.call_args.kwargs["instructions"] == ["Be brief."]
        conversation = agent_cls.return_value.arun.await_args.args[0]
        assert [m.role for m in conversation] == ["user"]

    @pytest.mark.asyncio
    async def test_provider_error_is_classified(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        agent_cls = MagicMock()
        agent_cls.return_value.arun = AsyncMock(side_effect=Exception("Incorrect API key"))

        with (
            patch("niche.ai.client.get_model_from_config"),
            patch("agno.agent.Agent", agent_cls),
        ):
            with pytest.raises(AIServiceError) as exc_info:
                await generate_response([ChatMessage(role="user", content="hi")], _settings())

        assert exc_info.value.kind == AIErrorType.INVALID_KEY
