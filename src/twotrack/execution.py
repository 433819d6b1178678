"""
Execution contexts — separate WHAT (pure pipeline) from HOW it is run.

A pipeline built from Outcome.flat_map / map calls describes what should
happen. An ExecutionContext decides how it runs: plainly, with structured
logging and timing, or wrapped in several layers at once. The containers
themselves never log; this module is the place where runs become visible.

Usage:
    def pipeline(cmd: CreateOrder) -> Outcome[Order, str]:
        return (
            Outcome.success(cmd)
            .flat_map(validate)
            .flat_map(persist)
        )

    outcome = LoggingExecutionContext(operation="CreateOrder").execute(
        lambda: pipeline(cmd)
    )

    # Or using the decorator
    @with_context(LoggingExecutionContext(operation="CreateOrder"))
    def handle(cmd: CreateOrder) -> Outcome[Order, str]:
        return pipeline(cmd)
"""

from __future__ import annotations

import functools
import time
from typing import Any, Callable, Optional, Protocol, TypeVar, runtime_checkable

import structlog

from twotrack.config import get_settings
from twotrack.logs import resolve_level
from twotrack.outcome import Failure, Outcome

T = TypeVar("T")
E = TypeVar("E")

log = structlog.get_logger("twotrack.execution")


# ──────────────────────── Protocol (Interface) ────────────────────────


@runtime_checkable
class ExecutionContext(Protocol):
    """
    Protocol for execution contexts.

    Any class with an execute(computation) method satisfies it; no
    inheritance needed.
    """

    def execute(self, computation: Callable[[], Outcome[T, E]]) -> Outcome[T, E]:
        """Run an Outcome-returning computation within this context."""
        ...


# ──────────────────────── NoOp (Testing) ────────────────────────


class NoOpExecutionContext:
    """
    Passthrough execution context: runs the computation as is.

    Use for unit tests and for pipelines that need no wrapping.
    """

    def execute(self, computation: Callable[[], Outcome[T, E]]) -> Outcome[T, E]:
        return computation()


# ──────────────────────── Logging ────────────────────────


class LoggingExecutionContext:
    """
    Execution context that logs entry, exit, duration and outcome state.

    Wraps another context (decorator pattern). An exception escaping the
    computation is logged and returned as Failure(exception).

        ctx = LoggingExecutionContext(operation="CreateOrder")

    Events: execution.started, execution.completed, execution.crashed.
    When `log_level` is not given, TWOTRACK_EXECUTION_LOG_LEVEL decides.
    """

    def __init__(
        self,
        inner: ExecutionContext | None = None,
        operation: str = "unknown",
        log_level: Optional[int] = None,
    ) -> None:
        self._inner = inner or NoOpExecutionContext()
        self._operation = operation
        if log_level is None:
            log_level = resolve_level(get_settings().execution_log_level)
        self._log_level = log_level

    def execute(self, computation: Callable[[], Outcome[T, E]]) -> Outcome[T, E]:
        log.log(self._log_level, "execution.started", operation=self._operation)
        start = time.monotonic()

        try:
            outcome = self._inner.execute(computation)
        except Exception as e:
            log.error(
                "execution.crashed",
                operation=self._operation,
                elapsed_s=round(time.monotonic() - start, 3),
                error=str(e),
                exc_info=True,
            )
            return Failure(e)

        log.log(
            self._log_level,
            "execution.completed",
            operation=self._operation,
            elapsed_s=round(time.monotonic() - start, 3),
            outcome="SUCCESS" if outcome.is_success() else "FAILURE",
        )
        return outcome


# ──────────────────────── Composable ────────────────────────


class ComposableExecutionContext:
    """
    Compose several execution contexts into one.

    The first context is the outermost:

        composed = ComposableExecutionContext(
            LoggingExecutionContext(operation="CreateOrder"),
            RetryContext(attempts=3),
        )
        # Logging wraps Retry wraps computation
    """

    def __init__(self, *contexts: ExecutionContext) -> None:
        if not contexts:
            raise ValueError("At least one execution context is required")
        self._contexts = list(contexts)

    def execute(self, computation: Callable[[], Outcome[T, E]]) -> Outcome[T, E]:
        wrapped = computation
        for ctx in reversed(self._contexts):
            wrapped = functools.partial(ctx.execute, wrapped)
        return wrapped()


# ──────────────────────── Decorator Helper ────────────────────────


def with_context(ctx: ExecutionContext) -> Callable[[Callable[..., Outcome[T, E]]], Callable[..., Outcome[T, E]]]:
    """
    Decorator that runs every call of an Outcome-returning function in `ctx`.

        @with_context(LoggingExecutionContext(operation="Checkout"))
        def checkout(cart: Cart) -> Outcome[Receipt, str]:
            return Outcome.success(cart).flat_map(charge)

    Equivalent to `ctx.execute(lambda: checkout(cart))` at every call site.
    """

    def decorator(fn: Callable[..., Outcome[T, E]]) -> Callable[..., Outcome[T, E]]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Outcome[T, E]:
            return ctx.execute(lambda: fn(*args, **kwargs))

        return wrapper

    return decorator
