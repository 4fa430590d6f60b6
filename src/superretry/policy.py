r"""Retry policy configuration and retry decision logic.

This module provides the immutable ``RetryPolicy`` resolved when a
``Retry`` is built, and the ``RetryDecider`` that applies it to a failed
attempt.
"""

from __future__ import annotations

__all__ = ["RetryDecider", "RetryDecision", "RetryPolicy"]

import logging
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from superretry.config import (
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_STRATEGY,
)
from superretry.exceptions import ConfigurationError, UnknownStrategyError
from superretry.validation import validate_policy_params

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable configuration for retry behavior.

    Args:
        strategy: Name of the registered backoff strategy. The name is
            resolved lazily, the first time a delay is computed.
        max_attempts: Total number of attempts, including the first one.
            Must be >= 1. A value of 1 disables retrying.
        initial_delay_ms: Base delay in milliseconds handed to the
            strategy. Must be >= 0.
        retry_if: Optional predicate called with the error of a failed
            attempt. Returning False stops retrying immediately. Defaults
            to retrying every error.
        max_delay_ms: Optional cap applied to each computed delay.
        jitter_factor: Factor for random jitter added to each delay. The
            jitter is ``uniform(0, jitter_factor) * delay``. Defaults to 0.

    Raises:
        ConfigurationError: If any parameter fails validation.

    Example:
        ```pycon
        >>> from superretry.policy import RetryPolicy
        >>> policy = RetryPolicy(strategy="fixed", max_attempts=3, initial_delay_ms=500)
        >>> policy.max_attempts
        3
        >>> merged = policy.merge(max_attempts=5)
        >>> merged.max_attempts
        5
        >>> policy.max_attempts  # Original unchanged
        3

        ```
    """

    strategy: str = DEFAULT_STRATEGY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS
    retry_if: Callable[[Exception], bool] | None = None
    max_delay_ms: int | None = None
    jitter_factor: float = 0.0

    def __post_init__(self) -> None:
        validate_policy_params(
            strategy=self.strategy,
            max_attempts=self.max_attempts,
            initial_delay_ms=self.initial_delay_ms,
            retry_if=self.retry_if,
            max_delay_ms=self.max_delay_ms,
            jitter_factor=self.jitter_factor,
        )

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with the given parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Policy fields to override.

        Returns:
            A new validated ``RetryPolicy``.

        Raises:
            ConfigurationError: If an override names an unknown field or
                produces an invalid policy.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            msg = f"unknown retry policy option(s): {', '.join(unknown)}"
            raise ConfigurationError(msg)
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        if not filtered_overrides:
            return self
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class RetryDecision(Enum):
    """Outcome of evaluating a failed attempt against a policy."""

    RETRY = "retry"
    EXHAUSTED = "exhausted"
    REJECTED = "rejected"


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    The checks run in a fixed order: the attempt limit first, then the
    retry predicate. Errors raised by the engine's own configuration
    checks are never retried.

    Args:
        policy: The policy to apply.

    Example:
        ```pycon
        >>> from superretry.policy import RetryDecider, RetryPolicy
        >>> decider = RetryDecider(RetryPolicy(max_attempts=2))
        >>> decider.decide(RuntimeError("boom"), attempt=1)
        <RetryDecision.RETRY: 'retry'>
        >>> decider.decide(RuntimeError("boom"), attempt=2)
        <RetryDecision.EXHAUSTED: 'exhausted'>

        ```
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    def decide(self, error: Exception, attempt: int) -> RetryDecision:
        """Decide what to do after ``attempt`` failed with ``error``.

        Args:
            error: The error raised by the attempt.
            attempt: The number of attempts made so far (1-indexed).

        Returns:
            ``RETRY`` if another attempt should be scheduled,
            ``EXHAUSTED`` if the attempt limit is reached, or
            ``REJECTED`` if the error is not retryable.
        """
        if isinstance(error, (ConfigurationError, UnknownStrategyError)):
            return RetryDecision.REJECTED
        if attempt >= self.policy.max_attempts:
            return RetryDecision.EXHAUSTED
        retry_if = self.policy.retry_if
        if retry_if is not None and not retry_if(error):
            logger.debug(f"retry_if returned False for {type(error).__name__}")
            return RetryDecision.REJECTED
        return RetryDecision.RETRY
