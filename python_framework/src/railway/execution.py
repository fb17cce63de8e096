"""
Execution contexts — separate WHAT (pure pipeline) from HOW (side effects).

A pipeline describes what should happen and returns Result[T]. An
ExecutionContext decides how it runs: timing, logging, exception guards.
The two are never mixed inside a pipeline stage.

    context = LoggingExecutionContext(operation="RootsGeneration")
    result = context.execute(lambda: run_pipeline(...))
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

import structlog

from railway.failure import ErrorCode, FailureDescription
from railway.result import Failure, Result

T = TypeVar("T")
log = structlog.get_logger()


@runtime_checkable
class ExecutionContext(Protocol):
    """Anything with execute(computation) -> Result[T] is an execution context."""

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]: ...


class NoOpExecutionContext:
    """Runs the computation directly."""

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        return computation()


class LoggingExecutionContext:
    """
    Logs start, outcome and elapsed time around another context.

    An exception escaping the computation becomes a TECHNICAL_ERROR failure,
    so callers always get a Result back.
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
    ) -> None:
        self._inner = inner if inner is not None else NoOpExecutionContext()
        self._operation = operation

    def execute(self, computation: Callable[[], Result[T]]) -> Result[T]:
        bound = log.bind(operation=self._operation)
        bound.info("execution.started")
        started = time.monotonic()

        def elapsed() -> float:
            return round(time.monotonic() - started, 3)

        try:
            result = self._inner.execute(computation)
        except Exception as e:
            bound.error("execution.crashed", elapsed_seconds=elapsed(), error=str(e))
            return Failure(
                FailureDescription(ErrorCode.TECHNICAL_ERROR, f"Execution failed: {e}", e)
            )

        bound.info(
            "execution.completed",
            elapsed_seconds=elapsed(),
            state="SUCCESS" if result.is_success() else "FAILURE",
        )
        return result
