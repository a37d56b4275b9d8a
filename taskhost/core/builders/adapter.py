from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, Iterable, Iterator, Mapping, Optional

from taskhost.core.errors import InvalidBuilderError

from .models import AltConventionFunction, BuilderContext, BuilderOutput, NativeBuilder, create_builder


@dataclass
class ExecutorContext:
    """Second argument passed to executor-convention functions."""

    root: str
    cwd: str
    project_name: Optional[str] = None
    target_name: Optional[str] = None
    configuration_name: Optional[str] = None
    project: Dict[str, Any] = field(default_factory=dict)


def _executor_context(context: BuilderContext) -> ExecutorContext:
    target = context.target
    return ExecutorContext(
        root=context.workspace_root,
        cwd=context.current_directory,
        project_name=target.project if target else None,
        target_name=target.target if target else None,
        configuration_name=target.configuration if target else None,
        project=dict(context.project_metadata or {}),
    )


def _to_output(value: Any) -> BuilderOutput:
    if isinstance(value, BuilderOutput):
        return value
    if isinstance(value, bool):
        return BuilderOutput(success=value)
    if isinstance(value, Mapping):
        error = value.get("error")
        return BuilderOutput(
            success=bool(value.get("success", False)),
            error=str(error) if error is not None else None,
            data={k: v for k, v in value.items() if k not in ("success", "error")},
        )
    if value is None:
        return BuilderOutput(success=False, error="Executor produced no result")
    return BuilderOutput(success=False, error=f"Executor produced an invalid result: {value!r}")


def _iter_results(result: Any) -> Iterable[Any]:
    # single results
    if result is None or isinstance(result, (bool, Mapping, BuilderOutput)):
        return [result]
    if isinstance(result, Iterable) and not isinstance(result, (str, bytes)):
        return result
    return [result]


def _adapt_sync(result: Any) -> Iterator[BuilderOutput]:
    for item in _iter_results(result):
        yield _to_output(item)


async def _adapt_async(result: Any) -> AsyncIterator[BuilderOutput]:
    if inspect.isawaitable(result):
        result = await result
    if hasattr(result, "__aiter__"):
        async for item in result:
            yield _to_output(item)
        return
    for item in _iter_results(result):
        yield _to_output(item)


def convert_executor_into_builder(executor: Any) -> NativeBuilder:
    """
    Wrap an executor so it runs through the builder protocol.

    The executor is called as fn(options, ExecutorContext) and may return a
    result mapping ({"success": bool, "error"?: str, ...}), an iterable of
    them, an awaitable, or an async iterable. Each emitted value becomes one
    BuilderOutput as soon as the executor emits it: synchronous executors
    produce a generator, asynchronous ones an async generator.
    """
    if isinstance(executor, NativeBuilder):
        return executor

    fn = executor.fn if isinstance(executor, AltConventionFunction) else executor
    if not callable(fn):
        raise InvalidBuilderError(f"Executor {executor!r} is not callable")

    name = getattr(executor, "name", None) or getattr(fn, "__name__", None)

    def handler(options: Dict[str, Any], context: BuilderContext) -> Any:
        result = fn(dict(options or {}), _executor_context(context))
        if inspect.isawaitable(result) or hasattr(result, "__aiter__"):
            return _adapt_async(result)
        return _adapt_sync(result)

    return create_builder(handler, name=name)
