r"""Middleware pipeline wrapping each individual attempt.

Middleware lets cross-cutting behavior (timing, logging, result
transformation, error wrapping) wrap every attempt without the task or
the orchestrator knowing about it. The chain is onion-shaped: the first
registered middleware is the outermost one, so it sees the call first
and the result (or error) last.

Example:
    ```pycon
    >>> import asyncio
    >>> from superretry.middleware import AttemptContext, MiddlewarePipeline
    >>> pipeline = MiddlewarePipeline()
    >>> async def shout(task, context, call_next):
    ...     return (await call_next()).upper()
    ...
    >>> _ = pipeline.use(shout)
    >>> async def task():
    ...     return "ok"
    ...
    >>> asyncio.run(pipeline.run(task, AttemptContext(attempt=0)))
    'OK'

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptContext",
    "FunctionMiddleware",
    "Middleware",
    "MiddlewarePipeline",
    "as_middleware",
    "invoke_task",
]

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from superretry.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator

    TaskFn = Callable[[], Awaitable[Any]]
    NextFn = Callable[[], Awaitable[Any]]
    MiddlewareFn = Callable[[TaskFn, "AttemptContext", NextFn], Awaitable[Any]]


@dataclass(frozen=True)
class AttemptContext:
    """Read-only information about the attempt in progress.

    A fresh context is created for every attempt.

    Attributes:
        attempt: Index of the attempt in progress (0-indexed). The first
            invocation has ``attempt=0``.
        max_attempts: Total number of attempts allowed by the policy.
        execution_id: Identifier of the ``Retry.execute`` call.
    """

    attempt: int
    max_attempts: int = 1
    execution_id: str | None = None


class Middleware(ABC):
    """Base class for attempt interceptors.

    Subclasses implement ``intercept`` and either await ``call_next()``
    to continue down the chain (ultimately running the task), or return
    or raise directly to short-circuit the attempt. An error raised here
    is handled by the retry policy exactly like an error raised by the
    task.
    """

    @abstractmethod
    async def intercept(
        self,
        task: TaskFn,
        context: AttemptContext,
        call_next: NextFn,
    ) -> Any:
        """Intercept one attempt.

        Args:
            task: The raw task being retried.
            context: Information about the attempt in progress.
            call_next: Coroutine function running the rest of the chain.

        Returns:
            The attempt's result, possibly transformed.
        """


class FunctionMiddleware(Middleware):
    """Adapt a plain ``(task, context, call_next)`` function to ``Middleware``."""

    def __init__(self, func: MiddlewareFn) -> None:
        if not callable(func):
            msg = f"middleware must be callable, got {type(func).__name__}"
            raise ConfigurationError(msg)
        self.func = func

    async def intercept(
        self,
        task: TaskFn,
        context: AttemptContext,
        call_next: NextFn,
    ) -> Any:
        return await invoke_task(lambda: self.func(task, context, call_next))

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({getattr(self.func, '__qualname__', self.func)!r})"


def as_middleware(middleware: Middleware | MiddlewareFn) -> Middleware:
    """Return ``middleware`` as a ``Middleware`` instance.

    Raises:
        ConfigurationError: If ``middleware`` is neither a ``Middleware``
            nor a callable.
    """
    if isinstance(middleware, Middleware):
        return middleware
    return FunctionMiddleware(middleware)


async def invoke_task(task: Callable[[], Any]) -> Any:
    """Call ``task`` and await its result if it is awaitable."""
    result = task()
    if inspect.isawaitable(result):
        result = await result
    return result


class _Chain:
    """One pass through a middleware snapshot for a single attempt."""

    def __init__(
        self,
        middleware: tuple[Middleware, ...],
        task: TaskFn,
        context: AttemptContext,
    ) -> None:
        self._middleware = middleware
        self._task = task
        self._context = context

    async def dispatch(self, index: int) -> Any:
        if index >= len(self._middleware):
            return await invoke_task(self._task)

        called = False

        async def call_next() -> Any:
            nonlocal called
            if called:
                msg = f"call_next() called more than once by {self._middleware[index]!r}"
                raise RuntimeError(msg)
            called = True
            return await self.dispatch(index + 1)

        return await self._middleware[index].intercept(self._task, self._context, call_next)


class MiddlewarePipeline:
    """Ordered list of middleware composed around each attempt.

    The chain is snapshotted at the start of every attempt, so middleware
    added while an execution is in flight applies from the next attempt.
    """

    def __init__(self) -> None:
        self._middleware: list[Middleware] = []

    def use(self, middleware: Middleware | MiddlewareFn) -> Middleware | MiddlewareFn:
        """Append a middleware to the chain.

        Args:
            middleware: A ``Middleware`` instance or an async function
                ``(task, context, call_next)``.

        Returns:
            The given middleware, so ``use`` works as a decorator.

        Raises:
            ConfigurationError: If ``middleware`` is not usable.
        """
        self._middleware.append(as_middleware(middleware))
        return middleware

    async def run(self, task: TaskFn, context: AttemptContext) -> Any:
        """Run ``task`` through the chain for one attempt."""
        return await _Chain(tuple(self._middleware), task, context).dispatch(0)

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(tuple(self._middleware))
