r"""Delay calculation and cancellable waiting between attempts."""

from __future__ import annotations

__all__ = ["calculate_delay_ms", "wait_for_delay"]

import asyncio
import logging
import math
import random
from numbers import Real
from typing import TYPE_CHECKING

from superretry.backoff.registry import default_registry
from superretry.exceptions import ConfigurationError

if TYPE_CHECKING:
    from superretry.backoff.registry import StrategyRegistry
    from superretry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_delay_ms(
    policy: RetryPolicy,
    attempt: int,
    registry: StrategyRegistry | None = None,
) -> int:
    """Calculate the delay before the attempt following ``attempt``.

    The delay is calculated as follows:
    1. Resolve the policy's strategy by name and call it with
       ``(attempt, policy.initial_delay_ms)``.
    2. Apply the ``max_delay_ms`` cap, if set.
    3. Add jitter, if ``jitter_factor > 0``:
       ``uniform(0, jitter_factor) * delay``.

    Args:
        policy: The retry policy.
        attempt: The number of the attempt that just failed (1-indexed).
        registry: The registry to resolve the strategy from. Defaults to
            the process-wide registry.

    Returns:
        The delay in whole milliseconds.

    Raises:
        UnknownStrategyError: If the strategy name is not registered.
        ConfigurationError: If the strategy returns a negative or
            non-numeric delay.

    Example:
        ```pycon
        >>> from superretry.policy import RetryPolicy
        >>> from superretry.utils.sleep import calculate_delay_ms
        >>> policy = RetryPolicy(strategy="exponential", initial_delay_ms=100)
        >>> [calculate_delay_ms(policy, attempt) for attempt in (1, 2, 3)]
        [100, 200, 400]
        >>> calculate_delay_ms(policy.merge(max_delay_ms=250), 3)
        250

        ```
    """
    registry = registry if registry is not None else default_registry
    compute = registry.resolve(policy.strategy)
    delay = compute(attempt, policy.initial_delay_ms)
    if isinstance(delay, bool) or not isinstance(delay, Real) or not math.isfinite(delay):
        msg = f"strategy {policy.strategy!r} returned a non-numeric delay: {delay!r}"
        raise ConfigurationError(msg)
    if delay < 0:
        msg = f"strategy {policy.strategy!r} returned a negative delay: {delay!r}"
        raise ConfigurationError(msg)

    if policy.max_delay_ms is not None and delay > policy.max_delay_ms:
        logger.debug(f"Capping delay from {delay}ms to {policy.max_delay_ms}ms")
        delay = policy.max_delay_ms

    if policy.jitter_factor > 0:
        jitter = random.uniform(0, policy.jitter_factor) * delay  # noqa: S311
        delay += jitter
    return round(delay)


async def wait_for_delay(delay_ms: int, cancel_event: asyncio.Event | None = None) -> bool:
    """Suspend the current task for ``delay_ms`` milliseconds.

    When a cancellation event is given, the wait ends as soon as the event
    is set and the pending timer is released.

    Args:
        delay_ms: The delay in milliseconds.
        cancel_event: Optional event that interrupts the wait when set.

    Returns:
        True if the full delay elapsed, False if the wait was interrupted
        by ``cancel_event``.
    """
    seconds = delay_ms / 1000
    if cancel_event is None:
        await asyncio.sleep(seconds)
        return True
    if cancel_event.is_set():
        return False
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return True
    return False
