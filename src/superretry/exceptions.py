r"""Exception hierarchy for retry execution.

Task errors are never wrapped by the engine: whatever the task (or a
middleware) raises is what the caller of ``Retry.execute`` receives. The
classes below cover the engine's own failure modes.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "HttpRequestError",
    "RetryCancelledError",
    "SuperRetryError",
    "UnknownStrategyError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx


class SuperRetryError(Exception):
    """Base class for all errors raised by superretry itself."""


class ConfigurationError(SuperRetryError, ValueError):
    """Raised when a policy, strategy or listener is misconfigured.

    Configuration errors are raised at construction or registration time
    and are never retried.
    """


class UnknownStrategyError(SuperRetryError, LookupError):
    """Raised when a backoff strategy name is not registered.

    Args:
        name: The strategy name that could not be resolved.
        available: The names registered at resolution time.

    Example:
        ```pycon
        >>> from superretry.exceptions import UnknownStrategyError
        >>> error = UnknownStrategyError("cubic", available=("exponential", "fixed"))
        >>> error.name
        'cubic'
        >>> str(error)
        "unknown backoff strategy 'cubic' (registered: exponential, fixed)"

        ```
    """

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = tuple(available)
        msg = f"unknown backoff strategy {name!r} (registered: {', '.join(self.available)})"
        super().__init__(msg)


class RetryCancelledError(SuperRetryError):
    """Raised when an execution is cancelled through its cancellation event.

    Args:
        attempts: The number of attempts made before cancellation.
    """

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"retry execution cancelled after {attempts} attempt(s)")


class HttpRequestError(SuperRetryError):
    """Raised when an HTTP request made through ``superretry.http`` fails.

    Args:
        method: The HTTP method used.
        url: The URL requested.
        message: Human readable description of the failure.
        status_code: The HTTP status code, if a response was received.
        response: The ``httpx.Response``, if a response was received.
        cause: The underlying httpx exception, if any.

    Example:
        ```pycon
        >>> from superretry.exceptions import HttpRequestError
        >>> error = HttpRequestError(
        ...     method="GET",
        ...     url="https://example.com",
        ...     message="GET request to https://example.com failed with status 503",
        ...     status_code=503,
        ... )
        >>> error.status_code
        503

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        self.__cause__ = cause
