r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff"]

from superretry.backoff.base import BaseBackoffStrategy


class FibonacciBackoff(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: base_delay_ms * fibonacci(attempt), with optional
    max_delay_ms cap.

    This strategy sits between linear and exponential backoff, starting
    slow and ramping up gradually along the sequence 1, 1, 2, 3, 5, 8, ...

    Args:
        max_delay_ms: Optional maximum delay cap in milliseconds.

    Example:
        ```pycon
        >>> from superretry.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff()
        >>> [backoff(attempt, 100) for attempt in (1, 2, 3, 4, 5)]
        [100, 100, 200, 300, 500]
        >>> FibonacciBackoff(max_delay_ms=1000)(11, 100)  # fib(11) = 89, capped
        1000

        ```
    """

    @staticmethod
    def _fibonacci(n: int) -> int:
        """Calculate the nth Fibonacci number (1-indexed).

        Args:
            n: The position in the Fibonacci sequence (1-indexed).

        Returns:
            The nth Fibonacci number, or 0 for ``n <= 0``.
        """
        if n <= 0:
            return 0
        a, b = 0, 1
        for _ in range(n - 1):
            a, b = b, a + b
        return b

    def calculate(self, attempt: int, base_delay_ms: float) -> float:
        return base_delay_ms * self._fibonacci(attempt)
