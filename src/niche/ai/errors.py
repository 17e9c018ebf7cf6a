"""Classification of model provider failures into user-facing error kinds."""

from __future__ import annotations

from enum import StrEnum

import httpx


class AIErrorType(StrEnum):
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_KEY = "invalid_key"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    UNKNOWN = "unknown"


class AIServiceError(Exception):
    """A content-generation failure with a kind, a message and a hint."""

    def __init__(self, kind: AIErrorType, message: str, details: str = "") -> None:
        self.kind = kind
        self.message = message
        self.details = details
        super().__init__(f"{message}\n\n{details}" if details else message)


_QUOTA_PATTERNS: tuple[str, ...] = ("quota", "exceeded", "insufficient_quota")
_INVALID_KEY_PATTERNS: tuple[str, ...] = ("invalid", "api_key", "Incorrect API key")
_RATE_LIMIT_PATTERNS: tuple[str, ...] = ("rate", "limit")
_NETWORK_PATTERNS: tuple[str, ...] = ("network", "ECONNREFUSED")


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def parse_api_error(exc: BaseException) -> AIServiceError:
    """Map a provider exception onto an :class:`AIServiceError`.

    Checks run in order (quota, credentials, rate limit, network) and the
    first match wins; a 429 is reported as quota exhaustion.
    """
    message = str(exc)
    code = str(getattr(exc, "code", "") or "")
    status = _status_code(exc)

    if (
        any(p in message for p in _QUOTA_PATTERNS)
        or code == "insufficient_quota"
        or status == 429
    ):
        return AIServiceError(
            AIErrorType.QUOTA_EXCEEDED,
            "API quota exceeded. Please check your provider billing settings.",
            "Your account has reached its usage limit. "
            "Add a payment method or upgrade your plan with your model provider.",
        )

    if any(p in message for p in _INVALID_KEY_PATTERNS) or status == 401:
        return AIServiceError(
            AIErrorType.INVALID_KEY,
            "Invalid API key. Please check your provider API key.",
            "Verify the key in ~/.niche/.env and make sure it is still active.",
        )

    if any(p in message for p in _RATE_LIMIT_PATTERNS):
        return AIServiceError(
            AIErrorType.RATE_LIMIT,
            "Rate limit reached. Please wait a moment and try again.",
            "Too many requests in a short time.",
        )

    if isinstance(exc, (httpx.TransportError, ConnectionError)) or any(
        p in message for p in _NETWORK_PATTERNS
    ):
        return AIServiceError(
            AIErrorType.NETWORK,
            "Network error. Please check your internet connection.",
            "Unable to reach the model provider. Check your connection and try again.",
        )

    return AIServiceError(
        AIErrorType.UNKNOWN,
        message or "An unexpected error occurred",
        "Please try again or contact support if the issue persists.",
    )
