r"""Fixed backoff strategy."""

from __future__ import annotations

__all__ = ["FixedBackoff"]

from superretry.backoff.base import BaseBackoffStrategy


class FixedBackoff(BaseBackoffStrategy):
    """Fixed backoff strategy.

    Returns the base delay for every attempt, regardless of the attempt
    number. Registered under the name ``"fixed"``.

    Example:
        ```pycon
        >>> from superretry.backoff import FixedBackoff
        >>> backoff = FixedBackoff()
        >>> backoff(1, 500)
        500
        >>> backoff(7, 500)
        500

        ```
    """

    def calculate(self, attempt: int, base_delay_ms: float) -> float:  # noqa: ARG002
        return base_delay_ms
