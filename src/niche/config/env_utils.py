"""Utilities for reading the ~/.niche/.env file."""

from __future__ import annotations

import os
from pathlib import Path

from niche.config.constants import ENV_FILE


def read_env_file(env_path: Path | None = None) -> dict[str, str]:
    """Parse the .env file and return key-value pairs.

    Strips inline comments (``# ...``) and whitespace.
    """
    if env_path is None:
        env_path = ENV_FILE

    result: dict[str, str] = {}
    if not env_path.exists():
        return result

    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            k, _, v = line.partition("=")
            k = k.strip()
            if " #" in v:
                v = v[: v.index(" #")]
            result[k] = v.strip()
    except OSError:
        pass

    return result


def load_env(env_path: Path | None = None) -> None:
    """Load the .env file into os.environ so API keys are always available.

    Existing environment variables take priority and are never overwritten.
    """
    for key, value in read_env_file(env_path).items():
        if key and key not in os.environ:
            os.environ[key] = value
