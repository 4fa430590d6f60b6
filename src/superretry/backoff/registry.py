r"""Process-wide registry mapping strategy names to delay functions.

A strategy is any callable ``(attempt, base_delay_ms) -> delay_ms``. The
registry is shared by every ``Retry`` instance in the process and is
consulted by name when a delay is first needed, so strategies registered
after a ``Retry`` is built, but before it fails, are honored.

Example:
    ```pycon
    >>> from superretry.backoff import register_strategy, resolve_strategy
    >>> register_strategy("quadratic", lambda attempt, base: attempt**2 * base)
    >>> resolve_strategy("quadratic")(3, 100)
    900

    ```
"""

from __future__ import annotations

__all__ = [
    "StrategyRegistry",
    "default_registry",
    "register_strategy",
    "registered_strategies",
    "resolve_strategy",
]

import logging
import threading
from typing import TYPE_CHECKING

from superretry.backoff.exponential import ExponentialBackoff
from superretry.backoff.fixed import FixedBackoff
from superretry.exceptions import UnknownStrategyError
from superretry.validation import validate_callable, validate_strategy_name

if TYPE_CHECKING:
    from collections.abc import Callable

    StrategyFn = Callable[[int, float], float]

logger: logging.Logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Thread-safe mapping from strategy names to delay functions.

    Writers serialize on a lock and publish a fresh dictionary, so readers
    always see a consistent snapshot without locking. Registering an
    existing name replaces the previous definition.

    Example:
        ```pycon
        >>> from superretry.backoff import StrategyRegistry
        >>> registry = StrategyRegistry()
        >>> registry.register("double", lambda attempt, base: 2 * base)
        >>> registry.resolve("double")(1, 50)
        100
        >>> registry.names()
        ('double',)

        ```
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._strategies: dict[str, StrategyFn] = {}

    def register(self, name: str, compute: StrategyFn) -> None:
        """Register (or replace) a strategy.

        Args:
            name: The strategy name.
            compute: Callable ``(attempt, base_delay_ms) -> delay_ms``.

        Raises:
            ConfigurationError: If ``name`` is not a non-empty string or
                ``compute`` is not callable.
        """
        validate_strategy_name(name)
        validate_callable(compute, f"strategy {name!r}")
        with self._lock:
            if name in self._strategies:
                logger.debug(f"Replacing backoff strategy {name!r}")
            strategies = dict(self._strategies)
            strategies[name] = compute
            self._strategies = strategies

    def resolve(self, name: str) -> StrategyFn:
        """Return the strategy registered under ``name``.

        Raises:
            UnknownStrategyError: If no strategy is registered under ``name``.
        """
        strategies = self._strategies
        try:
            return strategies[name]
        except KeyError:
            raise UnknownStrategyError(name, available=sorted(strategies)) from None

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._strategies))

    def __contains__(self, name: object) -> bool:
        return name in self._strategies


default_registry = StrategyRegistry()
default_registry.register("fixed", FixedBackoff())
default_registry.register("exponential", ExponentialBackoff())


def register_strategy(name: str, compute: StrategyFn) -> None:
    """Register a strategy in the process-wide registry.

    Args:
        name: The strategy name. Last registration for a name wins.
        compute: Callable ``(attempt, base_delay_ms) -> delay_ms``.

    Raises:
        ConfigurationError: If ``name`` is invalid or ``compute`` is not
            callable.
    """
    default_registry.register(name, compute)


def resolve_strategy(name: str) -> StrategyFn:
    """Look up a strategy in the process-wide registry.

    Raises:
        UnknownStrategyError: If the name is not registered.
    """
    return default_registry.resolve(name)


def registered_strategies() -> tuple[str, ...]:
    return default_registry.names()
