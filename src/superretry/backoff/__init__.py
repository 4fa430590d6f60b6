r"""Backoff strategies and the process-wide strategy registry.

Strategies compute the wait before the next attempt from the number of
the attempt that just failed and the policy's base delay. ``fixed`` and
``exponential`` are registered out of the box; the other classes are
available for registration under any name.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ExponentialBackoff",
    "FibonacciBackoff",
    "FixedBackoff",
    "LinearBackoff",
    "QuadraticBackoff",
    "StrategyRegistry",
    "default_registry",
    "register_strategy",
    "registered_strategies",
    "resolve_strategy",
]

from superretry.backoff.base import BaseBackoffStrategy
from superretry.backoff.exponential import ExponentialBackoff
from superretry.backoff.fibonacci import FibonacciBackoff
from superretry.backoff.fixed import FixedBackoff
from superretry.backoff.linear import LinearBackoff, QuadraticBackoff
from superretry.backoff.registry import (
    StrategyRegistry,
    default_registry,
    register_strategy,
    registered_strategies,
    resolve_strategy,
)
