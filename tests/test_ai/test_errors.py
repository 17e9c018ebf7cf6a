"""Tests for provider error classification."""

from __future__ import annotations

import httpx
import pytest

from niche.ai.errors import AIErrorType, AIServiceError, parse_api_error


class _ProviderError(Exception):
    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


@pytest.mark.parametrize(("exc", "kind"), [
    (Exception("You exceeded your current quota"), AIErrorType.QUOTA_EXCEEDED),
    (_ProviderError("billing", code="insufficient_quota"), AIErrorType.QUOTA_EXCEEDED),
    (_ProviderError("Too Many Requests", status_code=429), AIErrorType.QUOTA_EXCEEDED),
    (Exception("Incorrect API key provided"), AIErrorType.INVALID_KEY),
    (Exception("missing api_key"), AIErrorType.INVALID_KEY),
    (_ProviderError("Unauthorized", status_code=401), AIErrorType.INVALID_KEY),
    (Exception("rate of requests too high"), AIErrorType.RATE_LIMIT),
    (Exception("network unreachable"), AIErrorType.NETWORK),
    (Exception("connect ECONNREFUSED 127.0.0.1:443"), AIErrorType.NETWORK),
    (ConnectionError("reset by peer"), AIErrorType.NETWORK),
    (httpx.ConnectError("connection failed"), AIErrorType.NETWORK),
    (Exception("something odd happened"), AIErrorType.UNKNOWN),
])
def test_classification(exc: Exception, kind: AIErrorType):
    assert parse_api_error(exc).kind == kind


def test_quota_checked_before_rate_limit():
    """A 'rate limit exceeded' message matches quota first."""
    assert parse_api_error(Exception("rate limit exceeded")).kind == AIErrorType.QUOTA_EXCEEDED


def test_invalid_key_checked_before_rate_limit():
    assert parse_api_error(Exception("invalid rate tier")).kind == AIErrorType.INVALID_KEY


def test_unknown_keeps_original_message():
    err = parse_api_error(Exception("model went sideways"))
    assert err.message == "model went sideways"
    assert str(err).startswith("model went sideways\n\n")


def test_unknown_with_empty_message():
    assert parse_api_error(Exception()).message == "An unexpected error occurred"


def test_str_joins_message_and_details():
    err = AIServiceError(AIErrorType.NETWORK, "Network error.", "Check your connection.")
    assert str(err) == "Network error.\n\nCheck your connection."
    assert str(AIServiceError(AIErrorType.UNKNOWN, "Just this")) == "Just this"
