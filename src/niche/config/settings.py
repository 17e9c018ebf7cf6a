"""Central settings: loads from ~/.niche/config.json + environment variables."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from niche.config.constants import CONFIG_FILE, NICHE_HOME, TASK_HISTORY_FILE
from niche.config.models import AIConfig, EngineConfig, ModelConfig


class Settings(BaseSettings):
    """All niche configuration in one place.

    Priority (highest → lowest):
      1. Environment variables (NICHE_ prefix, ``__`` for nesting)
      2. .env file
      3. ~/.niche/config.json
      4. Defaults defined here
    """

    model_config = SettingsConfigDict(
        env_prefix="NICHE_",
        env_nested_delimiter="__",
        env_file=(".env", str(NICHE_HOME / ".env")),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Sub-configs ---
    engine: EngineConfig = Field(default_factory=EngineConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    ai: AIConfig = Field(default_factory=AIConfig)

    # --- Top-level settings ---
    log_level: str = "WARNING"
    history_file: str = str(TASK_HISTORY_FILE)

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values: dict) -> dict:
        """Merge config.json values as defaults (env vars still override)."""
        if CONFIG_FILE.exists():
            try:
                file_data = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
                merged = {**file_data, **{k: v for k, v in values.items() if v is not None}}
                values = merged
            except (json.JSONDecodeError, OSError):
                pass
        return values

    @property
    def history_path(self) -> Path:
        return Path(self.history_file)

    def save(self) -> None:
        """Persist current settings to config.json."""
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        CONFIG_FILE.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @classmethod
    def config_exists(cls) -> bool:
        return CONFIG_FILE.exists()


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
