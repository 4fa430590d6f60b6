r"""Parameter validation for retry policies and strategy registration.

Every function raises ``ConfigurationError`` (a ``ValueError``) when the
value does not satisfy its constraint.
"""

from __future__ import annotations

__all__ = [
    "validate_callable",
    "validate_policy_params",
    "validate_strategy_name",
]

from typing import Any

from superretry.exceptions import ConfigurationError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_strategy_name(name: Any) -> None:
    """Validate a backoff strategy name.

    Args:
        name: The strategy name. Must be a non-empty string.

    Raises:
        ConfigurationError: If the name is not a non-empty string.

    Example:
        ```pycon
        >>> from superretry.validation import validate_strategy_name
        >>> validate_strategy_name("exponential")
        >>> validate_strategy_name("")  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        superretry.exceptions.ConfigurationError: strategy name must be a non-empty string, got ''

        ```
    """
    if not isinstance(name, str) or not name:
        msg = f"strategy name must be a non-empty string, got {name!r}"
        raise ConfigurationError(msg)


def validate_callable(value: Any, what: str) -> None:
    """Validate that ``value`` is callable.

    Args:
        value: The object to check.
        what: Description used in the error message.

    Raises:
        ConfigurationError: If ``value`` is not callable.
    """
    if not callable(value):
        msg = f"{what} must be callable, got {type(value).__name__}"
        raise ConfigurationError(msg)


def validate_policy_params(
    strategy: Any,
    max_attempts: Any,
    initial_delay_ms: Any,
    retry_if: Any = None,
    max_delay_ms: Any = None,
    jitter_factor: Any = 0.0,
) -> None:
    """Validate retry policy parameters.

    Args:
        strategy: Backoff strategy name. Must be a non-empty string.
        max_attempts: Total number of attempts. Must be an int >= 1.
        initial_delay_ms: Base delay in milliseconds. Must be an int >= 0.
        retry_if: Optional retry predicate. Must be callable if provided.
        max_delay_ms: Optional delay cap in milliseconds. Must be an int > 0
            if provided.
        jitter_factor: Factor for random additive jitter. Must be >= 0.

    Raises:
        ConfigurationError: If any parameter fails validation.

    Example:
        ```pycon
        >>> from superretry.validation import validate_policy_params
        >>> validate_policy_params("fixed", max_attempts=3, initial_delay_ms=500)
        >>> validate_policy_params("fixed", max_attempts=0, initial_delay_ms=500)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        superretry.exceptions.ConfigurationError: max_attempts must be an integer >= 1, got 0

        ```
    """
    validate_strategy_name(strategy)
    if not _is_int(max_attempts) or max_attempts < 1:
        msg = f"max_attempts must be an integer >= 1, got {max_attempts!r}"
        raise ConfigurationError(msg)
    if not _is_int(initial_delay_ms) or initial_delay_ms < 0:
        msg = f"initial_delay_ms must be an integer >= 0, got {initial_delay_ms!r}"
        raise ConfigurationError(msg)
    if retry_if is not None:
        validate_callable(retry_if, "retry_if")
    if max_delay_ms is not None and (not _is_int(max_delay_ms) or max_delay_ms <= 0):
        msg = f"max_delay_ms must be an integer > 0 if specified, got {max_delay_ms!r}"
        raise ConfigurationError(msg)
    if (
        isinstance(jitter_factor, bool)
        or not isinstance(jitter_factor, (int, float))
        or jitter_factor < 0
    ):
        msg = f"jitter_factor must be >= 0, got {jitter_factor!r}"
        raise ConfigurationError(msg)
