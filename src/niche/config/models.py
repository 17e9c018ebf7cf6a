"""Pydantic models for configuration sub-sections."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from niche.config.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_FAILURE_RATE,
    DEFAULT_STEP_DELAY_MAX_MS,
    DEFAULT_STEP_DELAY_MIN_MS,
    MAX_DOCUMENT_CHARS,
)


class EngineConfig(BaseModel):
    """Simulated execution settings."""

    step_delay_min_ms: int = DEFAULT_STEP_DELAY_MIN_MS
    step_delay_max_ms: int = DEFAULT_STEP_DELAY_MAX_MS
    failure_rate: float = DEFAULT_FAILURE_RATE  # per step
    max_concurrent_tasks: int = DEFAULT_CONCURRENCY

    @model_validator(mode="after")
    def validate_bounds(self) -> "EngineConfig":
        if self.step_delay_min_ms < 0:
            raise ValueError(f"step_delay_min_ms must be >= 0, got {self.step_delay_min_ms}")
        if self.step_delay_min_ms > self.step_delay_max_ms:
            raise ValueError(
                f"step_delay_min_ms ({self.step_delay_min_ms}) must not exceed "
                f"step_delay_max_ms ({self.step_delay_max_ms})"
            )
        if not 0.0 <= self.failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be 0.0-1.0, got {self.failure_rate}")
        if self.max_concurrent_tasks < 1:
            raise ValueError(
                f"max_concurrent_tasks must be >= 1, got {self.max_concurrent_tasks}"
            )
        return self


class ModelConfig(BaseModel):
    """Which LLM provider and models to use for AI-backed tasks."""

    provider: str = "openai"
    model_id: str = "gpt-4o-mini"
    heavy_model_id: str = "gpt-4o"  # extraction, reports, research
    auth_method: str = "api_key"  # "api_key" or "token"


class AIConfig(BaseModel):
    """AI-backed task settings."""

    max_document_chars: int = MAX_DOCUMENT_CHARS
    default_agent_type: str = "analyst"
    max_tokens: int = 4096
