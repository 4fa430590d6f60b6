r"""superretry - Policy-driven retry orchestration for async operations.

This package runs a caller-supplied async task and retries it when it
fails, according to a policy chosen when the ``Retry`` is built. Every
attempt can be wrapped by middleware, and progress is reported to event
listeners.

Key Features:
    - Named backoff strategies: ``fixed`` and ``exponential`` built in,
      any ``(attempt, base_delay_ms) -> delay_ms`` function registrable
    - Attempt limits and conditional retry predicates (``retry_if``)
    - Onion-style middleware around every attempt
    - ``retry``, ``success`` and ``failure`` lifecycle events
    - Cooperative cancellation through an ``asyncio.Event``
    - httpx helpers for retrying HTTP calls

Example:
    ```pycon
    >>> import asyncio
    >>> from superretry import Retry, register_strategy
    >>> register_strategy("quadratic", lambda attempt, base: attempt**2 * base)
    >>> retry = Retry(strategy="quadratic", max_attempts=4, initial_delay_ms=100)
    >>> retry.on("retry", lambda event: print(f"Attempt {event.attempt} delay: {event.delay_ms}ms"))
    >>> async def task():
    ...     return "Success!"
    ...
    >>> asyncio.run(retry.execute(task))
    'Success!'

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptContext",
    "AttemptFailedEvent",
    "ConfigurationError",
    "FailedEvent",
    "HttpRequestError",
    "Middleware",
    "Retry",
    "RetryCancelledError",
    "RetryEvent",
    "RetryPolicy",
    "SucceededEvent",
    "SuperRetryError",
    "UnknownStrategyError",
    "__version__",
    "register_strategy",
    "registered_strategies",
    "resolve_strategy",
]

from importlib.metadata import PackageNotFoundError, version

from superretry.backoff import register_strategy, registered_strategies, resolve_strategy
from superretry.events import AttemptFailedEvent, FailedEvent, RetryEvent, SucceededEvent
from superretry.exceptions import (
    ConfigurationError,
    HttpRequestError,
    RetryCancelledError,
    SuperRetryError,
    UnknownStrategyError,
)
from superretry.middleware import AttemptContext, Middleware
from superretry.policy import RetryPolicy
from superretry.retry import Retry

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
