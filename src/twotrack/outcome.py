"""
Outcome — success or failure as a value, never as a raised exception.

An Outcome[T, E] is either Success(value: T) or Failure(error: E). The error
is whatever the caller chose to store; the container puts no structure on it.
Every transformation short-circuits on the track it does not handle, so the
happy path is written once and failures ride along untouched.

    ┌───────────┐   flat_map    ┌───────────┐   flat_map    ┌──────────┐
    │ validate  │──Success──────│  enrich   │──Success──────│ persist  │──→ Outcome[T, E]
    │           │               │           │               │          │
    └─────┬─────┘               └─────┬─────┘               └─────┬────┘
          │ Failure                   │ Failure                   │ Failure
          └───────────────────────────┴───────────────────────────┴──→ Outcome[T, E]

Synchronous and asynchronous callbacks use separate methods. `map` calls a
plain function and returns an Outcome; `map_async` takes a coroutine function
and returns an AsyncOutcome that runs nothing until it is awaited.

Raising only happens in unwrap_or_raise / unwrap_error_or_raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    ClassVar,
    Generic,
    Optional,
    TypeVar,
    final,
)

from twotrack.errors import raise_payload
from twotrack.presence import ABSENT, Present, Presence

if TYPE_CHECKING:
    from twotrack.async_outcome import AsyncOutcome
    from twotrack.execution import ExecutionContext

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")
R = TypeVar("R")

_OUTCOME_KINDS = ("success", "failure")


class Outcome(Generic[T, E]):
    """
    Outcome container.

    Two possible states:
      - Success(value: T)  — the happy path
      - Failure(error: E)  — the error track

    Usage:
        >>> Outcome.success(21).map(lambda x: x * 2)
        Success(42)

        >>> Outcome.failure("bad input").map(lambda x: x * 2)
        Failure('bad input')
    """

    __slots__ = ()

    __outcome_kind__: ClassVar[str]

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        """Check if this Outcome is a Success."""
        return self.__outcome_kind__ == "success"

    def is_failure(self) -> bool:
        """Check if this Outcome is a Failure."""
        return self.__outcome_kind__ == "failure"

    # ──────────────────────── Extraction ────────────────────────

    def unwrap_or(self, fallback: U) -> T | U:
        """Return the success value, or `fallback` on failure."""
        match self:
            case Success(v):
                return v
        return fallback

    def unwrap_error_or(self, fallback: U) -> E | U:
        """Return the error, or `fallback` on success."""
        match self:
            case Failure(err):
                return err
        return fallback

    def unwrap_or_else(self, fn: Callable[[], U]) -> T | U:
        """Return the success value, or compute a fallback on failure."""
        match self:
            case Success(v):
                return v
        return fn()

    def unwrap_error_or_else(self, fn: Callable[[], U]) -> E | U:
        """Return the error, or compute a fallback on success."""
        match self:
            case Failure(err):
                return err
        return fn()

    def unwrap_or_raise(self, fn: Optional[Callable[[E], Any]] = None) -> T:
        """
        Return the success value, or raise on failure.

        On failure `fn(error)` builds what gets raised. Without `fn` the error
        itself is raised; a non-exception payload travels in UnwrapError.

            user = find_user(uid).unwrap_or_raise(lambda e: LookupError(e))
        """
        match self:
            case Success(v):
                return v
            case Failure(err):
                raise_payload(err, fn)
        raise TypeError("unreachable")  # pragma: no cover

    def unwrap_error_or_raise(self, fn: Optional[Callable[[T], Any]] = None) -> E:
        """Return the error, or raise `fn(value)` on success."""
        match self:
            case Failure(err):
                return err
            case Success(v):
                raise_payload(v, fn)
        raise TypeError("unreachable")  # pragma: no cover

    def unsafe_unwrap(self) -> T | E:
        """Return whichever payload this Outcome holds."""
        match self:
            case Success(v):
                return v
            case Failure(err):
                return err
        raise TypeError("unreachable")  # pragma: no cover

    def to_pair(self) -> tuple[Optional[T], Optional[E]]:
        """
        Go-style pair: (value, None) on success, (None, error) on failure.

            value, error = parse(raw).to_pair()
        """
        match self:
            case Success(v):
                return (v, None)
            case Failure(err):
                return (None, err)
        raise TypeError("unreachable")  # pragma: no cover

    def fold(self, on_success: Callable[[T], R], on_failure: Callable[[E], R]) -> R:
        """
        Apply one of two functions depending on the state.

            outcome.fold(
                on_success=lambda user: f"Hello {user.name}",
                on_failure=lambda err: f"Error: {err}",
            )
        """
        match self:
            case Success(v):
                return on_success(v)
            case Failure(err):
                return on_failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    # ──────────────────────── Core Transformations ────────────────────────

    def or_(self, other: Outcome[U, F]) -> Outcome[T | U, F]:
        """Keep self on success, otherwise take `other`."""
        if self.is_success():
            return self  # type: ignore[return-value]
        return other  # type: ignore[return-value]

    def __or__(self, other: Outcome[U, F]) -> Outcome[T | U, F]:
        return self.or_(other)

    def map(self, fn: Callable[[T], U]) -> Outcome[U, E]:
        """
        Transform the success value. Short-circuits on failure.

            Outcome.success(5).map(lambda x: x * 2)    # → Success(10)
            Outcome.failure("x").map(lambda x: x * 2)  # → same Failure
        """
        match self:
            case Success(v):
                return Success(fn(v))
        return self  # type: ignore[return-value]

    def map_error(self, fn: Callable[[E], F]) -> Outcome[T, F]:
        """Transform the error. Passes success through unchanged."""
        match self:
            case Failure(err):
                return Failure(fn(err))
        return self  # type: ignore[return-value]

    def flat_map(self, fn: Callable[[T], Outcome[U, F]]) -> Outcome[U, E | F]:
        """
        Chain an Outcome-returning function. Short-circuits on failure.

        This is what connects railway segments:

            def positive(x: int) -> Outcome[int, str]:
                if x > 0:
                    return Outcome.success(x)
                return Outcome.failure("must be positive")

            Outcome.success(5).flat_map(positive)   # → Success(5)
            Outcome.success(-1).flat_map(positive)  # → Failure('must be positive')
        """
        match self:
            case Success(v):
                return checked_outcome(fn(v), "flat_map")
        return self  # type: ignore[return-value]

    def flat_map_error(self, fn: Callable[[E], Outcome[U, F]]) -> Outcome[T | U, F]:
        """Recover from a failure with an Outcome-returning function."""
        match self:
            case Failure(err):
                return checked_outcome(fn(err), "flat_map_error")
        return self  # type: ignore[return-value]

    def filter(self, predicate: Callable[[T], bool]) -> Presence[T]:
        """
        Present(value) if the value satisfies `predicate`, else ABSENT.

        A Failure is always ABSENT and the predicate is not called.
        """
        match self:
            case Success(v) if predicate(v):
                return Present(v)
        return ABSENT

    def to_presence(self) -> Presence[T]:
        """Success(v) → Present(v); Failure → ABSENT."""
        match self:
            case Success(v):
                return Present(v)
        return ABSENT

    # ──────────────────────── Side Effects ────────────────────────

    def tap(self, fn: Callable[[T], Any]) -> Outcome[T, E]:
        """
        Execute a side effect on the success value without altering the Outcome.

            outcome.tap(lambda user: log.info("user.created", user_id=user.id))
        """
        match self:
            case Success(v):
                fn(v)
        return self

    def tap_error(self, fn: Callable[[E], Any]) -> Outcome[T, E]:
        """Execute a side effect on the error without altering the Outcome."""
        match self:
            case Failure(err):
                fn(err)
        return self

    # ──────────────────────── Async Support ────────────────────────

    def to_async(self) -> AsyncOutcome[T, E]:
        """Lift this resolved Outcome into an AsyncOutcome."""
        from twotrack.async_outcome import AsyncOutcome

        return AsyncOutcome(self)

    def map_async(self, fn: Callable[[T], Awaitable[U]]) -> AsyncOutcome[U, E]:
        """
        Async map: the coroutine runs when the returned AsyncOutcome is awaited.

            user = await Outcome.success(user_id).map_async(fetch_user)
        """
        return self.to_async().map_async(fn)

    def map_error_async(self, fn: Callable[[E], Awaitable[F]]) -> AsyncOutcome[T, F]:
        return self.to_async().map_error_async(fn)

    def flat_map_async(self, fn: Callable[[T], Awaitable[Outcome[U, F]]]) -> AsyncOutcome[U, E | F]:
        """
        Async flat_map: chain a coroutine function returning an Outcome.

            saved = await Outcome.success(order).flat_map_async(persist_order)
        """
        return self.to_async().flat_map_async(fn)

    def flat_map_error_async(
        self, fn: Callable[[E], Awaitable[Outcome[U, F]]]
    ) -> AsyncOutcome[T | U, F]:
        return self.to_async().flat_map_error_async(fn)

    # ──────────────────────── Execution Context ────────────────────────

    def within(self, execution_context: ExecutionContext) -> Outcome[T, E]:
        """
        Hand this Outcome to an execution context.

            outcome = (
                Outcome.success(data)
                .flat_map(validate)
                .flat_map(persist)
                .within(LoggingExecutionContext(operation="CreateOrder"))
            )
        """
        return execution_context.execute(lambda: self)

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T = None) -> Outcome[T, Any]:  # type: ignore[assignment]
        """Create a Success. With no argument the value is None."""
        return Success(value)

    @staticmethod
    def failure(error: E) -> Outcome[Any, E]:
        """Create a Failure carrying `error`."""
        return Failure(error)

    @staticmethod
    def from_predicate(value: T, error_if_falsy: E) -> Outcome[T, E]:
        """
        Success(value) if `value` is truthy, else Failure(error_if_falsy).

        0, "", [] and False all fail here. Use from_nullable when only None
        means "missing".
        """
        return Success(value) if value else Failure(error_if_falsy)

    @staticmethod
    def from_nullable(value: Optional[T], error_if_none: E) -> Outcome[T, E]:
        """
        Success(value) unless `value` is None.

            Outcome.from_nullable(0, "missing")    # → Success(0)
            Outcome.from_nullable(None, "missing") # → Failure('missing')
        """
        return Failure(error_if_none) if value is None else Success(value)

    @staticmethod
    def from_throwing(fn: Callable[[], T]) -> Outcome[T, Exception]:
        """
        Run `fn` and capture an exception as a Failure.

        The caught exception object is stored unchanged. Only Exception
        subclasses are caught.

        Before:
            try:
                return Outcome.success(json.loads(raw))
            except Exception as e:
                return Outcome.failure(e)

        After:
            return Outcome.from_throwing(lambda: json.loads(raw))
        """
        try:
            return Success(fn())
        except Exception as e:
            return Failure(e)

    @staticmethod
    def from_throwing_async(fn: Callable[[], Awaitable[T]]) -> AsyncOutcome[T, Exception]:
        """Async from_throwing. `fn()` is not called until the result is awaited."""
        from twotrack.async_outcome import AsyncOutcome

        async def _run() -> Outcome[T, Exception]:
            try:
                return Success(await fn())
            except Exception as e:
                return Failure(e)

        return AsyncOutcome.deferred(_run)

    @staticmethod
    def from_awaitable(awaitable: Awaitable[T]) -> AsyncOutcome[T, Exception]:
        """
        Wrap a pending computation: Success(result) or Failure(exception).

            outcome = await Outcome.from_awaitable(client.get(url))
        """
        return Outcome.from_throwing_async(lambda: awaitable)

    @staticmethod
    def is_instance(candidate: object) -> bool:
        """
        True for Success and Failure instances.

        Checks the variant discriminant rather than class identity, so
        containers from a reloaded copy of this module are still recognised.
        """
        return getattr(type(candidate), "__outcome_kind__", None) in _OUTCOME_KINDS


@final
@dataclass(frozen=True, slots=True)
class Success(Outcome[T, Any]):
    """The success track, wrapping a value of type T."""

    __outcome_kind__: ClassVar[str] = "success"

    value: T

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@final
@dataclass(frozen=True, slots=True)
class Failure(Outcome[Any, E]):
    """The failure track, wrapping an error of type E."""

    __outcome_kind__: ClassVar[str] = "failure"

    error: E

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


def checked_outcome(candidate: Any, operation: str) -> Outcome[Any, Any]:
    """Return `candidate` if it is an Outcome, otherwise raise TypeError."""
    if not Outcome.is_instance(candidate):
        raise TypeError(
            f"{operation} callback must return an Outcome, got {type(candidate).__name__}"
        )
    return candidate


# ──────────────────────── Combinators ────────────────────────


def all_of(*outcomes: Outcome[Any, E]) -> Outcome[list[Any], E]:
    """
    Collect success values while every input succeeds.

    Returns Success([v1, v2, ...]) in input order, or the first Failure.
    Inputs are read through their discriminant, so containers built by a
    reloaded copy of this module are handled like local ones.

        all_of(Outcome.success(1), Outcome.success(2))   # → Success([1, 2])
        all_of(Outcome.success(1), Outcome.failure("e")) # → Failure('e')
    """
    values: list[Any] = []
    for outcome in outcomes:
        if outcome.is_failure():
            return outcome  # type: ignore[return-value]
        values.append(outcome.unsafe_unwrap())
    return Success(values)


def any_of(*outcomes: Outcome[T, Any]) -> Outcome[T, list[Any]]:
    """
    Return the first Success, or a Failure listing every error in input order.

        any_of(Outcome.failure("a"), Outcome.success(2))  # → Success(2)
        any_of(Outcome.failure("a"), Outcome.failure("b")) # → Failure(['a', 'b'])
    """
    errors: list[Any] = []
    for outcome in outcomes:
        if outcome.is_success():
            return outcome  # type: ignore[return-value]
        errors.append(outcome.unsafe_unwrap())
    return Failure(errors)
