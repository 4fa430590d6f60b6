r"""Retry orchestrator for asynchronous operations.

This module provides the ``Retry`` class, which runs a caller-supplied
async task, retrying failed attempts according to a ``RetryPolicy``,
wrapping every attempt in a middleware chain and reporting progress on
an event channel.
"""

from __future__ import annotations

__all__ = ["Retry"]

import logging
import time
import uuid
from typing import TYPE_CHECKING, Any

from superretry.events import AttemptFailedEvent, EventEmitter, FailedEvent, SucceededEvent
from superretry.exceptions import RetryCancelledError
from superretry.middleware import AttemptContext, MiddlewarePipeline
from superretry.policy import RetryDecider, RetryDecision, RetryPolicy
from superretry.utils.sleep import calculate_delay_ms, wait_for_delay
from superretry.utils.structured_logging import clear_execution_id, set_execution_id
from superretry.validation import validate_callable

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Awaitable, Callable

    from superretry.backoff.registry import StrategyRegistry
    from superretry.events import Listener
    from superretry.middleware import Middleware, MiddlewareFn

logger: logging.Logger = logging.getLogger(__name__)


class Retry:
    """Executes async tasks with automatic retry logic.

    The executor orchestrates the following components:
    - RetryPolicy: Strategy name, attempt limit, base delay and predicate
    - RetryDecider: Determines whether a failed attempt is retried
    - MiddlewarePipeline: Interceptors wrapping every attempt
    - EventEmitter: Listeners notified of lifecycle events

    Attempts are strictly sequential. Only the error of the last attempt
    is surfaced to the caller; it is re-raised unchanged.

    Args:
        policy: A ready-made policy. When given, the keyword options below
            override its fields.
        strategy: Name of the registered backoff strategy.
        max_attempts: Total number of attempts, including the first one.
        initial_delay_ms: Base delay in milliseconds.
        retry_if: Optional predicate deciding whether an error is retried.
        max_delay_ms: Optional cap applied to each delay.
        jitter_factor: Factor for random jitter added to each delay.
        registry: Strategy registry used to resolve ``strategy``.
            Defaults to the process-wide registry.

    Raises:
        ConfigurationError: If the resulting policy is invalid.

    Example:
        ```pycon
        >>> import asyncio
        >>> from superretry import Retry
        >>> retry = Retry(strategy="fixed", max_attempts=3, initial_delay_ms=0)
        >>> calls = []
        >>> async def flaky():
        ...     calls.append(1)
        ...     if len(calls) < 3:
        ...         raise RuntimeError("temporary failure")
        ...     return "ok"
        ...
        >>> asyncio.run(retry.execute(flaky))
        'ok'
        >>> len(calls)
        3

        ```
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        strategy: str | None = None,
        max_attempts: int | None = None,
        initial_delay_ms: int | None = None,
        retry_if: Callable[[Exception], bool] | None = None,
        max_delay_ms: int | None = None,
        jitter_factor: float | None = None,
        registry: StrategyRegistry | None = None,
    ) -> None:
        base = policy if policy is not None else RetryPolicy()
        self._policy = base.merge(
            strategy=strategy,
            max_attempts=max_attempts,
            initial_delay_ms=initial_delay_ms,
            retry_if=retry_if,
            max_delay_ms=max_delay_ms,
            jitter_factor=jitter_factor,
        )
        self._registry = registry
        self._middleware = MiddlewarePipeline()
        self._events = EventEmitter()

    def __repr__(self) -> str:
        return (
            f"{type(self).__qualname__}(policy={self._policy!r}, "
            f"middleware={len(self._middleware)})"
        )

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    @property
    def middleware(self) -> MiddlewarePipeline:
        return self._middleware

    @property
    def events(self) -> EventEmitter:
        return self._events

    def use(self, middleware: Middleware | MiddlewareFn) -> Middleware | MiddlewareFn:
        """Append a middleware to the chain wrapping every attempt.

        The first registered middleware is the outermost one.

        Args:
            middleware: A ``Middleware`` instance or an async function
                ``(task, context, call_next)``.

        Returns:
            The given middleware, so ``use`` works as a decorator.
        """
        return self._middleware.use(middleware)

    def on(self, name: str, listener: Listener) -> None:
        """Register a listener on the ``"retry"``, ``"success"`` or
        ``"failure"`` channel."""
        self._events.on(name, listener)

    def off(self, name: str, listener: Listener) -> bool:
        return self._events.off(name, listener)

    async def execute(
        self,
        task: Callable[[], Awaitable[Any]],
        *,
        cancel_event: asyncio.Event | None = None,
        **overrides: Any,
    ) -> Any:
        """Run ``task`` until it succeeds or the policy gives up.

        For each attempt, the task is run through the middleware chain.
        On failure the policy decides:
        - attempt limit reached: the error is raised (exhausted)
        - ``retry_if`` returned False: the error is raised at once,
          without delay (rejected)
        - otherwise: the delay is computed, a ``"retry"`` event is
          emitted, and the next attempt starts after the delay.

        Args:
            task: Zero-argument callable returning an awaitable.
            cancel_event: Optional cancellation token. Once set, no further
                attempt is started and a pending delay ends immediately.
            **overrides: Per-call overrides of the policy fields.

        Returns:
            The result of the successful attempt, as returned by the
            middleware chain.

        Raises:
            Exception: The error of the last attempt, unchanged.
            RetryCancelledError: If ``cancel_event`` was set.
            UnknownStrategyError: If the strategy is not registered when
                the first delay is computed.
            ConfigurationError: If ``task`` is not callable or
                ``overrides`` are invalid.
        """
        validate_callable(task, "task")
        policy = self._policy.merge(**overrides)
        decider = RetryDecider(policy)
        execution_id = uuid.uuid4().hex
        token = set_execution_id(execution_id)
        start_time = time.monotonic()
        last_error: Exception | None = None
        try:
            attempt = 0
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    raise RetryCancelledError(attempts=attempt) from last_error
                attempt += 1
                log_extra = {"execution_id": execution_id, "attempt": attempt}
                logger.debug(f"Starting attempt {attempt}/{policy.max_attempts}", extra=log_extra)
                context = AttemptContext(
                    attempt=attempt - 1,
                    max_attempts=policy.max_attempts,
                    execution_id=execution_id,
                )
                try:
                    result = await self._middleware.run(task, context)
                except Exception as exc:
                    last_error = exc
                    decision = decider.decide(exc, attempt)
                    if decision is not RetryDecision.RETRY:
                        logger.debug(
                            f"Attempt {attempt}/{policy.max_attempts} failed with "
                            f"{type(exc).__name__}, giving up ({decision.value})",
                            extra=log_extra,
                        )
                        self._events.emit(
                            "failure",
                            FailedEvent(
                                type=decision.value,
                                attempt=attempt,
                                error=exc,
                                elapsed_ms=_elapsed_ms(start_time),
                            ),
                        )
                        raise

                    if cancel_event is not None and cancel_event.is_set():
                        raise RetryCancelledError(attempts=attempt) from exc
                    delay_ms = calculate_delay_ms(policy, attempt, self._registry)
                    logger.debug(
                        f"Attempt {attempt}/{policy.max_attempts} failed with "
                        f"{type(exc).__name__}: {exc}; retrying in {delay_ms}ms",
                        extra={**log_extra, "delay_ms": delay_ms},
                    )
                    self._events.emit(
                        "retry",
                        AttemptFailedEvent(attempt=attempt, delay_ms=delay_ms, error=exc),
                    )
                    if not await wait_for_delay(delay_ms, cancel_event):
                        raise RetryCancelledError(attempts=attempt) from exc
                    continue

                logger.debug(f"Attempt {attempt}/{policy.max_attempts} succeeded", extra=log_extra)
                self._events.emit(
                    "success",
                    SucceededEvent(
                        attempt=attempt,
                        result=result,
                        elapsed_ms=_elapsed_ms(start_time),
                    ),
                )
                return result
        finally:
            clear_execution_id(token)


def _elapsed_ms(start_time: float) -> float:
    return (time.monotonic() - start_time) * 1000
