r"""Lifecycle events emitted during retry execution.

Events are frozen dataclasses tagged with a ``type`` field, so several
kinds of event can share one channel name without breaking listeners
that only care about one of them.

Channel names and the events delivered on them:
- ``"retry"``: ``AttemptFailedEvent`` (``type="attempt"``), emitted once
  per scheduled retry, before the delay.
- ``"success"``: ``SucceededEvent`` (``type="success"``).
- ``"failure"``: ``FailedEvent`` (``type="exhausted"`` or
  ``type="rejected"``).

Example:
    ```pycon
    >>> from superretry.events import AttemptFailedEvent, EventEmitter
    >>> emitter = EventEmitter()
    >>> emitter.on("retry", lambda event: print(event.type, event.attempt, event.delay_ms))
    >>> emitter.emit("retry", AttemptFailedEvent(attempt=1, delay_ms=500, error=RuntimeError()))
    attempt 1 500

    ```
"""

from __future__ import annotations

__all__ = [
    "EVENT_NAMES",
    "AttemptFailedEvent",
    "EventEmitter",
    "FailedEvent",
    "RetryEvent",
    "SucceededEvent",
]

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from superretry.exceptions import ConfigurationError
from superretry.validation import validate_callable

if TYPE_CHECKING:
    from collections.abc import Callable

    Listener = Callable[["RetryEvent"], Any]

logger: logging.Logger = logging.getLogger(__name__)

EVENT_NAMES = ("retry", "success", "failure")


@dataclass(frozen=True)
class RetryEvent:
    """Base class of all lifecycle events."""

    type: str = field(init=False)


@dataclass(frozen=True)
class AttemptFailedEvent(RetryEvent):
    """An attempt failed and another one has been scheduled.

    Attributes:
        attempt: The number of the attempt that failed (1-indexed).
        delay_ms: The wait before the next attempt, in milliseconds.
        error: The error raised by the failed attempt.
    """

    type: Literal["attempt"] = field(default="attempt", init=False)
    attempt: int
    delay_ms: int
    error: Exception


@dataclass(frozen=True)
class SucceededEvent(RetryEvent):
    """The execution succeeded.

    Attributes:
        attempt: The number of the attempt that succeeded (1-indexed).
        result: The (possibly middleware-transformed) result.
        elapsed_ms: Time spent on all attempts and delays.
    """

    type: Literal["success"] = field(default="success", init=False)
    attempt: int
    result: Any
    elapsed_ms: float


@dataclass(frozen=True)
class FailedEvent(RetryEvent):
    """The execution failed for good.

    Attributes:
        type: ``"exhausted"`` when the attempt limit was reached, or
            ``"rejected"`` when the retry predicate refused the error.
        attempt: The number of the last attempt (1-indexed).
        error: The error surfaced to the caller.
        elapsed_ms: Time spent on all attempts and delays.
    """

    type: Literal["exhausted", "rejected"]
    attempt: int
    error: Exception
    elapsed_ms: float


class EventEmitter:
    """Synchronous, named event channel.

    Listeners run in registration order, synchronously, at the point the
    event is emitted. A listener that raises is logged and skipped: the
    remaining listeners still run and the retry sequence is not affected.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {name: [] for name in EVENT_NAMES}

    def on(self, name: str, listener: Listener) -> None:
        """Register ``listener`` for events emitted on ``name``.

        Raises:
            ConfigurationError: If ``name`` is not a known event name or
                ``listener`` is not a plain callable. Listeners run
                synchronously, so coroutine functions are rejected.
        """
        self._check_name(name)
        validate_callable(listener, "listener")
        if inspect.iscoroutinefunction(listener):
            msg = f"listener must be a synchronous callable, got coroutine function {listener!r}"
            raise ConfigurationError(msg)
        self._listeners[name].append(listener)

    def off(self, name: str, listener: Listener) -> bool:
        """Remove the first registration of ``listener`` for ``name``.

        Returns:
            True if a registration was removed.
        """
        self._check_name(name)
        try:
            self._listeners[name].remove(listener)
        except ValueError:
            return False
        return True

    def listener_count(self, name: str) -> int:
        self._check_name(name)
        return len(self._listeners[name])

    def emit(self, name: str, event: RetryEvent) -> None:
        """Deliver ``event`` to every listener registered for ``name``."""
        self._check_name(name)
        for listener in tuple(self._listeners[name]):
            try:
                listener(event)
            except Exception:
                logger.exception(f"{name!r} listener {listener!r} raised on {event.type!r} event")

    @staticmethod
    def _check_name(name: str) -> None:
        if name not in EVENT_NAMES:
            msg = f"unknown event name {name!r}, expected one of: {', '.join(EVENT_NAMES)}"
            raise ConfigurationError(msg)
