r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from superretry.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay_ms * (2 ** (attempt - 1)), with
    optional max_delay_ms cap. Registered under the name
    ``"exponential"``; this is the default strategy.

    Args:
        max_delay_ms: Optional maximum delay cap in milliseconds.

    Example:
        ```pycon
        >>> from superretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> backoff(1, 100)  # Before the second attempt
        100
        >>> backoff(2, 100)
        200
        >>> backoff(3, 100)
        400
        >>> # With max_delay_ms cap
        >>> backoff = ExponentialBackoff(max_delay_ms=1000)
        >>> backoff(10, 100)  # Would be 51200, but capped
        1000

        ```
    """

    def calculate(self, attempt: int, base_delay_ms: float) -> float:
        return base_delay_ms * (2 ** (attempt - 1))
