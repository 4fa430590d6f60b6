r"""Unit tests for the middleware pipeline."""

from __future__ import annotations

import dataclasses
from typing import Any
from unittest.mock import AsyncMock

import pytest

from superretry.exceptions import ConfigurationError
from superretry.middleware import (
    AttemptContext,
    FunctionMiddleware,
    Middleware,
    MiddlewarePipeline,
    as_middleware,
    invoke_task,
)


def recorder(name: str, log: list[str]):
    async def middleware(task, context, call_next):  # noqa: ARG001
        log.append(f"{name}:enter")
        try:
            return await call_next()
        finally:
            log.append(f"{name}:exit")

    return middleware


class PrefixMiddleware(Middleware):
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    async def intercept(self, task, context, call_next) -> Any:  # noqa: ARG002
        return f"{self.prefix}{await call_next()}"


####################################
#     Tests for AttemptContext     #
####################################


def test_attempt_context_is_read_only() -> None:
    context = AttemptContext(attempt=0, max_attempts=3, execution_id="abc")
    with pytest.raises(dataclasses.FrozenInstanceError):
        context.attempt = 1


####################################
#     Tests for MiddlewarePipeline #
####################################


@pytest.mark.asyncio
async def test_pipeline_without_middleware_runs_task() -> None:
    task = AsyncMock(return_value="ok")
    assert await MiddlewarePipeline().run(task, AttemptContext(attempt=0)) == "ok"
    task.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_pipeline_onion_ordering() -> None:
    log: list[str] = []
    pipeline = MiddlewarePipeline()
    pipeline.use(recorder("A", log))
    pipeline.use(recorder("B", log))

    async def task() -> str:
        log.append("task")
        return "ok"

    assert await pipeline.run(task, AttemptContext(attempt=0)) == "ok"
    assert log == ["A:enter", "B:enter", "task", "B:exit", "A:exit"]


@pytest.mark.asyncio
async def test_pipeline_short_circuit_skips_inner_middleware_and_task() -> None:
    log: list[str] = []
    pipeline = MiddlewarePipeline()

    @pipeline.use
    async def short_circuit(task, context, call_next):  # noqa: ARG001
        log.append("A")
        return "cached"

    pipeline.use(recorder("B", log))
    task = AsyncMock(return_value="ok")

    assert await pipeline.run(task, AttemptContext(attempt=0)) == "cached"
    assert log == ["A"]
    task.assert_not_called()


@pytest.mark.asyncio
async def test_pipeline_transforms_result() -> None:
    pipeline = MiddlewarePipeline()
    pipeline.use(PrefixMiddleware("outer-"))
    pipeline.use(PrefixMiddleware("inner-"))
    assert await pipeline.run(AsyncMock(return_value="ok"), AttemptContext(attempt=0)) == (
        "outer-inner-ok"
    )


@pytest.mark.asyncio
async def test_pipeline_error_wrapping() -> None:
    pipeline = MiddlewarePipeline()

    @pipeline.use
    async def wrap_errors(task, context, call_next):  # noqa: ARG001
        try:
            return await call_next()
        except Exception as exc:
            msg = f"WRAPPED: {exc}"
            raise RuntimeError(msg) from exc

    task = AsyncMock(side_effect=ValueError("boom"))
    with pytest.raises(RuntimeError, match=r"WRAPPED: boom"):
        await pipeline.run(task, AttemptContext(attempt=0))


@pytest.mark.asyncio
async def test_pipeline_passes_task_and_context() -> None:
    seen = []
    pipeline = MiddlewarePipeline()

    @pipeline.use
    async def capture(task, context, call_next):
        seen.append((task, context))
        return await call_next()

    task = AsyncMock(return_value=1)
    context = AttemptContext(attempt=2, max_attempts=5, execution_id="exec")
    await pipeline.run(task, context)
    assert seen == [(task, context)]


@pytest.mark.asyncio
async def test_pipeline_call_next_twice_raises() -> None:
    pipeline = MiddlewarePipeline()

    @pipeline.use
    async def twice(task, context, call_next):  # noqa: ARG001
        await call_next()
        return await call_next()

    task = AsyncMock(return_value="ok")
    with pytest.raises(RuntimeError, match=r"call_next\(\) called more than once"):
        await pipeline.run(task, AttemptContext(attempt=0))
    task.assert_awaited_once()


@pytest.mark.asyncio
async def test_pipeline_accepts_sync_task() -> None:
    assert await MiddlewarePipeline().run(lambda: 42, AttemptContext(attempt=0)) == 42


def test_pipeline_len_and_iter() -> None:
    pipeline = MiddlewarePipeline()
    prefix = PrefixMiddleware("x")
    pipeline.use(prefix)
    pipeline.use(recorder("A", []))
    assert len(pipeline) == 2
    middleware = list(pipeline)
    assert middleware[0] is prefix
    assert isinstance(middleware[1], FunctionMiddleware)


def test_pipeline_use_returns_argument() -> None:
    pipeline = MiddlewarePipeline()
    func = recorder("A", [])
    assert pipeline.use(func) is func


####################################
#     Tests for helpers            #
####################################


def test_as_middleware_keeps_instances() -> None:
    middleware = PrefixMiddleware("x")
    assert as_middleware(middleware) is middleware


@pytest.mark.parametrize("value", [None, 1, "middleware"])
def test_as_middleware_rejects_non_callable(value: object) -> None:
    with pytest.raises(ConfigurationError, match=r"middleware must be callable"):
        as_middleware(value)


@pytest.mark.asyncio
async def test_invoke_task_awaits_awaitables() -> None:
    assert await invoke_task(AsyncMock(return_value="async")) == "async"
    assert await invoke_task(lambda: "sync") == "sync"
