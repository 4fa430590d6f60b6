r"""Linear and quadratic backoff strategies.

Neither is registered by default. Register them under the name of your
choice with ``register_strategy``.
"""

from __future__ import annotations

__all__ = ["LinearBackoff", "QuadraticBackoff"]

from superretry.backoff.base import BaseBackoffStrategy


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: base_delay_ms * attempt.

    Example:
        ```pycon
        >>> from superretry.backoff import LinearBackoff
        >>> backoff = LinearBackoff()
        >>> [backoff(attempt, 100) for attempt in (1, 2, 3)]
        [100, 200, 300]

        ```
    """

    def calculate(self, attempt: int, base_delay_ms: float) -> float:
        return base_delay_ms * attempt


class QuadraticBackoff(BaseBackoffStrategy):
    """Quadratic backoff strategy.

    Calculates delay as: base_delay_ms * attempt ** 2.

    Example:
        ```pycon
        >>> from superretry.backoff import QuadraticBackoff
        >>> [QuadraticBackoff()(attempt, 100) for attempt in (1, 2, 3)]
        [100, 400, 900]

        ```
    """

    def calculate(self, attempt: int, base_delay_ms: float) -> float:
        return base_delay_ms * attempt**2
