r"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import httpx

from superretry.exceptions import (
    ConfigurationError,
    HttpRequestError,
    RetryCancelledError,
    SuperRetryError,
    UnknownStrategyError,
)


def test_unknown_strategy_error() -> None:
    error = UnknownStrategyError("cubic", available=["exponential", "fixed"])
    assert isinstance(error, SuperRetryError)
    assert isinstance(error, LookupError)
    assert error.name == "cubic"
    assert error.available == ("exponential", "fixed")
    assert str(error) == "unknown backoff strategy 'cubic' (registered: exponential, fixed)"


def test_configuration_error_hierarchy() -> None:
    error = ConfigurationError("bad")
    assert isinstance(error, SuperRetryError)
    assert isinstance(error, ValueError)


def test_retry_cancelled_error() -> None:
    error = RetryCancelledError(attempts=2)
    assert error.attempts == 2
    assert str(error) == "retry execution cancelled after 2 attempt(s)"


def test_http_request_error_attributes() -> None:
    cause = httpx.ConnectError("refused")
    error = HttpRequestError(
        method="GET",
        url="https://example.com",
        message="GET request to https://example.com failed: refused",
        cause=cause,
    )
    assert error.method == "GET"
    assert error.url == "https://example.com"
    assert error.status_code is None
    assert error.response is None
    assert error.__cause__ is cause
    assert str(error) == "GET request to https://example.com failed: refused"


def test_http_request_error_with_status() -> None:
    response = httpx.Response(503)
    error = HttpRequestError(
        method="POST",
        url="https://example.com",
        message="failed",
        status_code=503,
        response=response,
    )
    assert error.status_code == 503
    assert error.response is response
