from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from superretry.backoff import ExponentialBackoff, FixedBackoff, StrategyRegistry

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def registry() -> StrategyRegistry:
    """Create an isolated registry holding the built-in strategies."""
    registry = StrategyRegistry()
    registry.register("fixed", FixedBackoff())
    registry.register("exponential", ExponentialBackoff())
    return registry


@pytest.fixture
def mock_listener() -> Mock:
    """Create a mock event listener."""
    return Mock()


class FlakyTask:
    """Async task failing with the given errors before succeeding.

    Args:
        errors: Errors raised by the first calls, in order.
        result: Value returned once the errors are used up.
    """

    def __init__(self, *errors: Exception, result: object = "ok") -> None:
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


@pytest.fixture
def flaky_task() -> type[FlakyTask]:
    return FlakyTask
