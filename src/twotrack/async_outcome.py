"""
AsyncOutcome — the Outcome protocol over a computation that has not finished.

An AsyncOutcome holds either a resolved Outcome or an awaitable that will
produce one. Chainable methods (map, flat_map, map_error, ...) return a new
AsyncOutcome immediately and run nothing; terminal accessors (unwrap_or,
to_pair, ...) are coroutines. Awaiting the wrapper itself yields the
underlying Outcome, not its payload.

    outcome = await (
        Outcome.from_awaitable(fetch_order(order_id))
        .map(parse_order)
        .flat_map_async(persist_order)
        .tap_error(lambda e: log.warning("order.sync_failed", error=str(e)))
    )

Each stage awaits the previous one and then delegates to the matching
synchronous Outcome method, so short-circuiting is exactly the synchronous
behaviour: a Failure skips every map/flat_map stage, a Success skips every
map_error/flat_map_error stage.

The pending computation starts the first time anything awaits the wrapper.
Its Outcome is cached, and concurrent awaiters share the single run. There is
no cancellation: once started, the computation runs to completion.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from twotrack.outcome import Failure, Outcome, Success, checked_outcome
from twotrack.presence import Presence

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")
R = TypeVar("R")


class AsyncOutcome(Generic[T, E]):
    """
    Awaitable wrapper around a pending Outcome.

        >>> async def main():
        ...     return await AsyncOutcome(Outcome.success(2)).map(lambda x: x * 3)
        >>> asyncio.run(main())
        Success(6)
    """

    __slots__ = ("_start", "_future", "_outcome")

    def __init__(self, source: Union[Outcome[T, E], Awaitable[Outcome[T, E]]]) -> None:
        self._future: Optional[asyncio.Future[Any]] = None
        self._outcome: Optional[Outcome[T, E]] = None
        self._start: Optional[Callable[[], Awaitable[Outcome[T, E]]]] = None
        if Outcome.is_instance(source):
            self._outcome = source  # type: ignore[assignment]
        else:
            self._start = lambda: source  # type: ignore[assignment,return-value]

    @classmethod
    def deferred(cls, factory: Callable[[], Awaitable[Outcome[T, E]]]) -> AsyncOutcome[T, E]:
        """
        Wrap a factory that is called the first time the wrapper is awaited.

        Nothing is created up front, so a wrapper that is never awaited
        leaves no coroutine behind.

            outcome = AsyncOutcome.deferred(lambda: load_profile(user_id))
        """
        wrapper = cls.__new__(cls)
        wrapper._future = None
        wrapper._outcome = None
        wrapper._start = factory
        return wrapper

    async def _resolve(self) -> Outcome[T, E]:
        if self._outcome is None:
            if self._future is None:
                if self._start is None:
                    raise TypeError("AsyncOutcome has neither an outcome nor a source")
                self._future = asyncio.ensure_future(self._start())
            resolved = await self._future
            if self._outcome is None:
                self._outcome = checked_outcome(resolved, "AsyncOutcome source")
                self._start = None
        return self._outcome

    def __await__(self):
        return self._resolve().__await__()

    def __repr__(self) -> str:
        if self._outcome is None:
            return "AsyncOutcome(<pending>)"
        return f"AsyncOutcome({self._outcome!r})"

    # ──────────────────────── Chaining ────────────────────────

    def _then(self, step: Callable[[Outcome[T, E]], Outcome[Any, Any]]) -> AsyncOutcome[Any, Any]:
        async def _run() -> Outcome[Any, Any]:
            return step(await self)

        return AsyncOutcome.deferred(_run)

    def _then_async(
        self, step: Callable[[Outcome[T, E]], Awaitable[Outcome[Any, Any]]]
    ) -> AsyncOutcome[Any, Any]:
        async def _run() -> Outcome[Any, Any]:
            return await step(await self)

        return AsyncOutcome.deferred(_run)

    def map(self, fn: Callable[[T], U]) -> AsyncOutcome[U, E]:
        return self._then(lambda outcome: outcome.map(fn))

    def map_error(self, fn: Callable[[E], F]) -> AsyncOutcome[T, F]:
        return self._then(lambda outcome: outcome.map_error(fn))

    def flat_map(self, fn: Callable[[T], Outcome[U, F]]) -> AsyncOutcome[U, E | F]:
        return self._then(lambda outcome: outcome.flat_map(fn))

    def flat_map_error(self, fn: Callable[[E], Outcome[U, F]]) -> AsyncOutcome[T | U, F]:
        return self._then(lambda outcome: outcome.flat_map_error(fn))

    def tap(self, fn: Callable[[T], Any]) -> AsyncOutcome[T, E]:
        """Run `fn(value)` on success once resolved; the Outcome is unchanged."""
        return self._then(lambda outcome: outcome.tap(fn))

    def tap_error(self, fn: Callable[[E], Any]) -> AsyncOutcome[T, E]:
        """Run `fn(error)` on failure once resolved; the Outcome is unchanged."""
        return self._then(lambda outcome: outcome.tap_error(fn))

    def or_(self, other: Union[Outcome[U, F], AsyncOutcome[U, F]]) -> AsyncOutcome[T | U, F]:
        """
        Keep this outcome on success, otherwise fall back to `other`.

        An AsyncOutcome fallback is only awaited when it is needed.
        """

        async def _pick(outcome: Outcome[T, E]) -> Outcome[Any, Any]:
            if outcome.is_success():
                return outcome
            if isinstance(other, AsyncOutcome):
                return await other
            return outcome.or_(other)

        return self._then_async(_pick)

    def __or__(self, other: Union[Outcome[U, F], AsyncOutcome[U, F]]) -> AsyncOutcome[T | U, F]:
        return self.or_(other)

    # ──────────────────────── Async Callbacks ────────────────────────
    # Steps read the discriminant, so an Outcome from a reloaded copy of the
    # outcome module takes the same track as a local one.

    def map_async(self, fn: Callable[[T], Awaitable[U]]) -> AsyncOutcome[U, E]:
        """Await `fn(value)` on success and wrap the result."""

        async def _step(outcome: Outcome[T, E]) -> Outcome[Any, Any]:
            if outcome.is_success():
                return Success(await fn(outcome.unsafe_unwrap()))
            return outcome

        return self._then_async(_step)

    def map_error_async(self, fn: Callable[[E], Awaitable[F]]) -> AsyncOutcome[T, F]:
        """Await `fn(error)` on failure and wrap the result."""

        async def _step(outcome: Outcome[T, E]) -> Outcome[Any, Any]:
            if outcome.is_failure():
                return Failure(await fn(outcome.unsafe_unwrap()))
            return outcome

        return self._then_async(_step)

    def flat_map_async(self, fn: Callable[[T], Awaitable[Outcome[U, F]]]) -> AsyncOutcome[U, E | F]:
        """
        Await an Outcome-returning coroutine function on success.

            order = await Outcome.success(cmd).flat_map_async(create_order)
        """

        async def _step(outcome: Outcome[T, E]) -> Outcome[Any, Any]:
            if outcome.is_success():
                return checked_outcome(await fn(outcome.unsafe_unwrap()), "flat_map_async")
            return outcome

        return self._then_async(_step)

    def flat_map_error_async(
        self, fn: Callable[[E], Awaitable[Outcome[U, F]]]
    ) -> AsyncOutcome[T | U, F]:
        """Await an Outcome-returning coroutine function on failure."""

        async def _step(outcome: Outcome[T, E]) -> Outcome[Any, Any]:
            if outcome.is_failure():
                return checked_outcome(await fn(outcome.unsafe_unwrap()), "flat_map_error_async")
            return outcome

        return self._then_async(_step)

    # ──────────────────────── Terminal Accessors ────────────────────────

    async def is_success(self) -> bool:
        return (await self).is_success()

    async def is_failure(self) -> bool:
        return (await self).is_failure()

    async def unwrap_or(self, fallback: U) -> T | U:
        return (await self).unwrap_or(fallback)

    async def unwrap_error_or(self, fallback: U) -> E | U:
        return (await self).unwrap_error_or(fallback)

    async def unwrap_or_else(self, fn: Callable[[], U]) -> T | U:
        return (await self).unwrap_or_else(fn)

    async def unwrap_error_or_else(self, fn: Callable[[], U]) -> E | U:
        return (await self).unwrap_error_or_else(fn)

    async def unwrap_or_raise(self, fn: Optional[Callable[[E], Any]] = None) -> T:
        """Resolve, then return the value or raise as Outcome.unwrap_or_raise does."""
        return (await self).unwrap_or_raise(fn)

    async def unwrap_error_or_raise(self, fn: Optional[Callable[[T], Any]] = None) -> E:
        return (await self).unwrap_error_or_raise(fn)

    async def unsafe_unwrap(self) -> T | E:
        return (await self).unsafe_unwrap()

    async def to_pair(self) -> tuple[Optional[T], Optional[E]]:
        return (await self).to_pair()

    async def to_presence(self) -> Presence[T]:
        return (await self).to_presence()

    async def filter(self, predicate: Callable[[T], bool]) -> Presence[T]:
        return (await self).filter(predicate)

    async def fold(self, on_success: Callable[[T], R], on_failure: Callable[[E], R]) -> R:
        return (await self).fold(on_success, on_failure)
