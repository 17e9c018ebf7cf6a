"""Paths and default values used across the project."""

from pathlib import Path

# Base directory for all niche data
NICHE_HOME = Path.home() / ".niche"

CONFIG_DIR = NICHE_HOME
CONFIG_FILE = CONFIG_DIR / "config.json"
ENV_FILE = NICHE_HOME / ".env"
LOGS_DIR = NICHE_HOME / "logs"
TASK_HISTORY_FILE = NICHE_HOME / "task_history.json"

# Simulated execution
DEFAULT_STEP_DELAY_MIN_MS = 1000
DEFAULT_STEP_DELAY_MAX_MS = 3000
DEFAULT_FAILURE_RATE = 0.05
DEFAULT_CONCURRENCY = 2

# AI-backed execution
MAX_DOCUMENT_CHARS = 50_000
TRUNCATION_NOTICE = "\n\n[Document truncated for processing]"

# Provider -> env var holding its API key
PROVIDER_API_KEY_ENV: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}

# Placeholder shipped in .env templates; treated as "not configured"
API_KEY_PLACEHOLDER = "your_openai_api_key_here"
