"""Model client: builds an Agno model from settings and runs one completion."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel

from niche.ai.errors import AIErrorType, AIServiceError, parse_api_error
from niche.config.constants import API_KEY_PLACEHOLDER, PROVIDER_API_KEY_ENV
from niche.config.env_utils import load_env

if TYPE_CHECKING:
    from niche.config.settings import Settings

logger = logging.getLogger("niche.ai.client")


class ChatMessage(BaseModel):
    """One turn of a conversation passed to the model."""

    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class AIResponse:
    """Text returned by the model plus token usage when reported."""

    content: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


def is_api_key_configured(provider: str) -> bool:
    """True when the provider needs no key or its key env var is set."""
    load_env()
    env_var = PROVIDER_API_KEY_ENV.get(provider)
    if env_var is None:
        return True  # e.g. ollama runs locally
    key = os.environ.get(env_var, "")
    return bool(key) and key != API_KEY_PLACEHOLDER


def get_model_from_config(
    provider: str,
    model_id: str,
    auth_method: str = "api_key",
    temperature: float | None = None,
    max_tokens: int | None = None,
):
    """Instantiate an Agno model class from provider/model_id/auth_method."""
    load_env()

    if provider == "anthropic":
        from agno.models.anthropic import Claude

        return Claude(id=model_id, temperature=temperature, max_tokens=max_tokens)

    if provider == "openai":
        from agno.models.openai import OpenAIChat

        if auth_method == "token":
            token = os.environ.get("OPENAI_AUTH_TOKEN")
            return OpenAIChat(
                id=model_id, api_key=token, temperature=temperature, max_tokens=max_tokens
            )
        return OpenAIChat(id=model_id, temperature=temperature, max_tokens=max_tokens)

    if provider == "google":
        from agno.models.google import Gemini

        return Gemini(id=model_id, temperature=temperature)

    if provider == "ollama":
        from agno.models.ollama import Ollama

        options = {"temperature": temperature} if temperature is not None else None
        return Ollama(id=model_id, options=options)

    if provider == "openrouter":
        from agno.models.openai import OpenAIChat

        return OpenAIChat(
            id=model_id,
            api_key=os.environ.get("OPENROUTER_API_KEY"),
            base_url="https://openrouter.ai/api/v1",
            temperature=temperature,
            max_tokens=max_tokens,
        )

    raise ValueError(f"Unknown model provider: {provider}")


def _metric(response: object, name: str) -> int | None:
    metrics = getattr(response, "metrics", None)
    value = getattr(metrics, name, None)
    return value if isinstance(value, int) else None


async def generate_response(
    messages: list[ChatMessage],
    settings: Settings,
    *,
    heavy: bool = False,
    temperature: float = 0.7,
) -> AIResponse:
    """Run one completion over *messages* and return the model's text.

    System messages become the agent's instructions; the rest are sent as
    the conversation. Raises :class:`AIServiceError` on any failure.
    """
    from agno.agent import Agent
    from agno.models.message import Message

    cfg = settings.model
    if not is_api_key_configured(cfg.provider):
        raise AIServiceError(
            AIErrorType.INVALID_KEY,
            f"{cfg.provider} API key not configured.",
            f"Add {PROVIDER_API_KEY_ENV.get(cfg.provider, 'the API key')} to ~/.niche/.env.",
        )

    model_id = cfg.heavy_model_id if heavy else cfg.model_id
    instructions = [m.content for m in messages if m.role == "system"]
    conversation = [
        Message(role=m.role, content=m.content) for m in messages if m.role != "system"
    ]

    try:
        model = get_model_from_config(
            cfg.provider,
            model_id,
            cfg.auth_method,
            temperature=temperature,
            max_tokens=settings.ai.max_tokens,
        )
        agent = Agent(model=model, instructions=instructions or None)
        response = await agent.arun(conversation)
    except AIServiceError:
        raise
    except Exception as exc:
        logger.warning("Model call to %s/%s failed: %s", cfg.provider, model_id, exc)
        raise parse_api_error(exc) from exc

    if "error" in str(getattr(response, "status", "")).lower():
        raise parse_api_error(RuntimeError(str(response.content or "")))

    content = response.content if response and response.content else ""
    return AIResponse(
        content=str(content) or "No response generated.",
        prompt_tokens=_metric(response, "input_tokens"),
        completion_tokens=_metric(response, "output_tokens"),
        total_tokens=_metric(response, "total_tokens"),
    )
