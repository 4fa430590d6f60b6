r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before the next
    attempt, given the number of the attempt that just failed and the
    policy's base delay. Instances are callable with the same
    ``(attempt, base_delay_ms)`` signature as plain strategy functions,
    so they can be handed directly to ``register_strategy``.

    Args:
        max_delay_ms: Optional maximum delay cap in milliseconds.

    Raises:
        ValueError: If ``max_delay_ms`` is non-positive.
    """

    def __init__(self, max_delay_ms: float | None = None) -> None:
        if max_delay_ms is not None and max_delay_ms <= 0:
            msg = f"max_delay_ms must be positive if specified, got {max_delay_ms}"
            raise ValueError(msg)
        self.max_delay_ms = max_delay_ms

    @abstractmethod
    def calculate(self, attempt: int, base_delay_ms: float) -> float:
        """Calculate the uncapped delay before the next attempt.

        Args:
            attempt: The number of the attempt that just failed (1-indexed).
                For example, attempt=1 computes the wait before the second
                attempt.
            base_delay_ms: The policy's base delay in milliseconds.

        Returns:
            The delay in milliseconds.
        """

    def __call__(self, attempt: int, base_delay_ms: float) -> float:
        delay = self.calculate(attempt, base_delay_ms)
        if self.max_delay_ms is not None:
            delay = min(delay, self.max_delay_ms)
        return delay

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}(max_delay_ms={self.max_delay_ms})"
