"""
Tests for AsyncOutcome.

Tests cover:
  - Construction from resolved outcomes, coroutines and futures
  - Laziness, single resolution and deferred factories
  - Chaining with sync and async callbacks, short-circuiting on both tracks
  - Terminal accessors
  - Async constructors on Outcome (from_awaitable, from_throwing_async, *_async)
"""

from __future__ import annotations

import asyncio
import gc
import warnings
from typing import Awaitable

import pytest

from twotrack import ABSENT, AsyncOutcome, Failure, Outcome, Present, Success, UnwrapError


async def _resolved(outcome: Outcome) -> Outcome:
    await asyncio.sleep(0)
    return outcome


async def _double(x: int) -> int:
    await asyncio.sleep(0)
    return x * 2


async def _double_text(text: str) -> str:
    await asyncio.sleep(0)
    return text * 2


# ═══════════════════════════════════════════════════════════════
# 1. Construction & Resolution
# ═══════════════════════════════════════════════════════════════


class TestResolution:
    @pytest.mark.asyncio
    async def test_await_resolved_outcome(self):
        assert await AsyncOutcome(Outcome.success(1)) == Success(1)

    @pytest.mark.asyncio
    async def test_await_coroutine(self):
        assert await AsyncOutcome(_resolved(Outcome.failure("e"))) == Failure("e")

    @pytest.mark.asyncio
    async def test_await_future(self):
        future = asyncio.get_running_loop().create_future()
        future.set_result(Outcome.success("done"))
        assert await AsyncOutcome(future) == Success("done")

    @pytest.mark.asyncio
    async def test_nothing_runs_until_awaited(self):
        calls: list[str] = []

        async def work() -> Outcome:
            calls.append("ran")
            return Outcome.success(1)

        wrapper = AsyncOutcome(work()).map(lambda x: x + 1)
        await asyncio.sleep(0)
        assert calls == []
        assert await wrapper == Success(2)
        assert calls == ["ran"]

    @pytest.mark.asyncio
    async def test_pending_computation_resolves_once(self):
        calls: list[str] = []

        async def work() -> Outcome:
            calls.append("ran")
            await asyncio.sleep(0)
            return Outcome.success(1)

        wrapper = AsyncOutcome(work())
        first, second = await asyncio.gather(wrapper, wrapper.map(lambda x: x + 1))
        assert await wrapper == Success(1)
        assert first == Success(1)
        assert second == Success(2)
        assert calls == ["ran"]

    @pytest.mark.asyncio
    async def test_source_must_produce_outcome(self):
        async def not_an_outcome() -> int:
            return 1

        with pytest.raises(TypeError, match="must return an Outcome"):
            await AsyncOutcome(not_an_outcome())

    @pytest.mark.asyncio
    async def test_repr(self):
        wrapper = AsyncOutcome(_resolved(Outcome.success(1)))
        assert repr(wrapper) == "AsyncOutcome(<pending>)"
        await wrapper
        assert repr(wrapper) == "AsyncOutcome(Success(1))"

    @pytest.mark.asyncio
    async def test_deferred_factory_called_on_first_await(self):
        calls: list[str] = []

        def start() -> Awaitable[Outcome]:
            calls.append("started")
            return _resolved(Outcome.success(7))

        wrapper = AsyncOutcome.deferred(start)
        assert calls == []
        assert await wrapper == Success(7)
        assert await wrapper == Success(7)
        assert calls == ["started"]

    @pytest.mark.asyncio
    async def test_missing_source_raises_type_error(self):
        wrapper = AsyncOutcome.deferred(None)  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="neither an outcome nor a source"):
            await wrapper

    def test_unawaited_chain_leaves_no_coroutine_behind(self):
        async def work() -> int:
            return 1

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            dropped = [
                Outcome.success(1).map_async(_double),
                Outcome.failure(3).map_error_async(_double),
                AsyncOutcome(Outcome.success(1)).map(lambda x: x + 1).tap(print),
                Outcome.from_throwing_async(work).map(str),
            ]
            del dropped
            gc.collect()

        never_awaited = [str(w.message) for w in caught if "never awaited" in str(w.message)]
        assert never_awaited == []


# ═══════════════════════════════════════════════════════════════
# 2. Chaining
# ═══════════════════════════════════════════════════════════════


class TestChaining:
    @pytest.mark.asyncio
    async def test_map_and_flat_map_in_order(self):
        order: list[str] = []

        def step(name: str, value: int) -> int:
            order.append(name)
            return value + 1

        outcome = await (
            AsyncOutcome(_resolved(Outcome.success(0)))
            .map(lambda x: step("a", x))
            .flat_map(lambda x: Outcome.success(step("b", x)))
            .map(lambda x: step("c", x))
        )
        assert outcome == Success(3)
        assert order == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_failure_skips_success_stages(self):
        calls: list[str] = []
        outcome = await (
            AsyncOutcome(_resolved(Outcome.failure("e")))
            .map(lambda x: calls.append("map"))
            .flat_map(lambda x: calls.append("flat_map") or Outcome.success(x))
            .map_async(_double)
            .tap(lambda x: calls.append("tap"))
        )
        assert outcome == Failure("e")
        assert calls == []

    @pytest.mark.asyncio
    async def test_success_skips_error_stages(self):
        calls: list[str] = []
        outcome = await (
            AsyncOutcome(_resolved(Outcome.success(1)))
            .map_error(lambda e: calls.append("map_error"))
            .flat_map_error(lambda e: calls.append("flat_map_error") or Outcome.success(0))
            .tap_error(lambda e: calls.append("tap_error"))
        )
        assert outcome == Success(1)
        assert calls == []

    @pytest.mark.asyncio
    async def test_error_track(self):
        outcome = await (
            AsyncOutcome(_resolved(Outcome.failure("e")))
            .map_error(str.upper)
            .flat_map_error(lambda e: Outcome.success(f"recovered from {e}"))
        )
        assert outcome == Success("recovered from E")

    @pytest.mark.asyncio
    async def test_async_callbacks(self):
        async def validate(x: int) -> Outcome[int, str]:
            return Outcome.success(x) if x < 100 else Outcome.failure("too big")

        async def describe(e: str) -> str:
            return f"invalid: {e}"

        async def fallback(e: str) -> Outcome[int, str]:
            return Outcome.success(-1)

        ok = await AsyncOutcome(Outcome.success(3)).map_async(_double).flat_map_async(validate)
        assert ok == Success(6)

        bad = await AsyncOutcome(Outcome.success(60)).map_async(_double).flat_map_async(validate)
        assert bad == Failure("too big")

        described = await AsyncOutcome(Outcome.failure("x")).map_error_async(describe)
        assert described == Failure("invalid: x")

        recovered = await AsyncOutcome(Outcome.failure("x")).flat_map_error_async(fallback)
        assert recovered == Success(-1)

    @pytest.mark.asyncio
    async def test_tap_runs_in_chain(self):
        captured: list[object] = []
        outcome = await (
            AsyncOutcome(_resolved(Outcome.success(1)))
            .tap(captured.append)
            .map(lambda x: x + 1)
            .tap(captured.append)
        )
        assert outcome == Success(2)
        assert captured == [1, 2]

    @pytest.mark.asyncio
    async def test_tap_error(self):
        captured: list[object] = []
        await AsyncOutcome(Outcome.failure("e")).tap_error(captured.append)
        assert captured == ["e"]

    @pytest.mark.asyncio
    async def test_or_with_outcome_and_async_outcome(self):
        assert await AsyncOutcome(Outcome.failure("a")).or_(Outcome.success(2)) == Success(2)
        assert await AsyncOutcome(Outcome.success(1)).or_(Outcome.success(2)) == Success(1)
        fallback = AsyncOutcome(_resolved(Outcome.success(3)))
        assert await (AsyncOutcome(Outcome.failure("a")) | fallback) == Success(3)

    @pytest.mark.asyncio
    async def test_callback_exception_propagates_at_await(self):
        wrapper = AsyncOutcome(Outcome.success(1)).map(lambda x: x / 0)
        with pytest.raises(ZeroDivisionError):
            await wrapper

    @pytest.mark.asyncio
    async def test_flat_map_must_return_outcome(self):
        with pytest.raises(TypeError, match="must return an Outcome"):
            await AsyncOutcome(Outcome.success(1)).flat_map(lambda x: x)

    @pytest.mark.asyncio
    async def test_async_callbacks_follow_reloaded_outcome(self, reloaded_outcome):
        calls: list[int] = []

        async def record(x: int) -> int:
            calls.append(x)
            return x * 2

        async def recover(e: str) -> Outcome[str, str]:
            return Outcome.success(f"recovered {e}")

        foreign_success = reloaded_outcome.Outcome.success(5)
        foreign_failure = reloaded_outcome.Outcome.failure("e")

        assert await AsyncOutcome(foreign_success).map_async(record) == Success(10)
        assert calls == [5]
        assert await AsyncOutcome(foreign_failure).flat_map_error_async(recover) == Success("recovered e")
        assert await AsyncOutcome(foreign_failure).map_error_async(_double_text) == Failure("ee")
        assert await AsyncOutcome(foreign_failure).map_async(record) is foreign_failure
        assert calls == [5]


# ═══════════════════════════════════════════════════════════════
# 3. Terminal Accessors
# ═══════════════════════════════════════════════════════════════


class TestTerminalAccessors:
    @pytest.mark.asyncio
    async def test_success_accessors(self):
        wrapper = AsyncOutcome(_resolved(Outcome.success(5)))
        assert await wrapper.is_success()
        assert not await wrapper.is_failure()
        assert await wrapper.unwrap_or(0) == 5
        assert await wrapper.unwrap_error_or("none") == "none"
        assert await wrapper.unwrap_or_else(lambda: 0) == 5
        assert await wrapper.unwrap_error_or_else(lambda: "none") == "none"
        assert await wrapper.unwrap_or_raise() == 5
        assert await wrapper.unsafe_unwrap() == 5
        assert await wrapper.to_pair() == (5, None)
        assert await wrapper.to_presence() == Present(5)
        assert await wrapper.filter(lambda x: x > 10) is ABSENT
        assert await wrapper.fold(lambda v: v + 1, lambda e: 0) == 6

    @pytest.mark.asyncio
    async def test_failure_accessors(self):
        wrapper = AsyncOutcome(_resolved(Outcome.failure("e")))
        assert await wrapper.is_failure()
        assert await wrapper.unwrap_or(0) == 0
        assert await wrapper.unwrap_error_or("none") == "e"
        assert await wrapper.unwrap_or_else(lambda: 0) == 0
        assert await wrapper.unwrap_error_or_else(lambda: "none") == "e"
        assert await wrapper.unwrap_error_or_raise() == "e"
        assert await wrapper.to_pair() == (None, "e")
        assert await wrapper.to_presence() is ABSENT
        assert await wrapper.fold(lambda v: v, lambda e: f"failed: {e}") == "failed: e"

    @pytest.mark.asyncio
    async def test_unwrap_or_raise_on_failure(self):
        wrapper = AsyncOutcome(_resolved(Outcome.failure("e")))
        with pytest.raises(ValueError, match="^e$"):
            await wrapper.unwrap_or_raise(lambda e: ValueError(e))
        with pytest.raises(UnwrapError):
            await wrapper.unwrap_or_raise()


# ═══════════════════════════════════════════════════════════════
# 4. Async Constructors on Outcome
# ═══════════════════════════════════════════════════════════════


class TestOutcomeAsyncConstructors:
    @pytest.mark.asyncio
    async def test_from_awaitable_success(self):
        assert await Outcome.from_awaitable(_double(2)) == Success(4)

    @pytest.mark.asyncio
    async def test_from_awaitable_keeps_exception(self):
        async def boom() -> int:
            raise ConnectionError("refused")

        outcome = await Outcome.from_awaitable(boom())
        assert outcome.is_failure()
        assert isinstance(outcome.error, ConnectionError)
        assert str(outcome.error) == "refused"

    @pytest.mark.asyncio
    async def test_from_throwing_async_is_lazy(self):
        calls: list[str] = []

        async def work() -> int:
            calls.append("ran")
            return 1

        wrapper = Outcome.from_throwing_async(work)
        assert calls == []
        assert await wrapper == Success(1)
        assert calls == ["ran"]

    @pytest.mark.asyncio
    async def test_outcome_async_methods_return_wrappers(self):
        async def lookup(x: int) -> Outcome[int, str]:
            return Outcome.success(x + 1)

        async def explain(e: str) -> str:
            return f"because {e}"

        async def retry(e: str) -> Outcome[int, str]:
            return Outcome.success(0)

        wrapper = Outcome.success(2).map_async(_double)
        assert isinstance(wrapper, AsyncOutcome)
        assert await wrapper == Success(4)
        assert await Outcome.success(2).flat_map_async(lookup) == Success(3)
        assert await Outcome.failure("x").map_error_async(explain) == Failure("because x")
        assert await Outcome.failure("x").flat_map_error_async(retry) == Success(0)
        assert await Outcome.failure("x").map_async(_double) == Failure("x")

    @pytest.mark.asyncio
    async def test_to_async(self):
        wrapper = Outcome.success(1).to_async()
        assert isinstance(wrapper, AsyncOutcome)
        assert await wrapper == Success(1)
