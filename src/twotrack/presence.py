"""
Presence — a value that may or may not be there, without None checks.

A Presence[T] is either Present(value: T) or the shared ABSENT instance.
Only explicit construction decides the variant: Present(0), Present("") and
Present(None) are all present. The two lenient constructors are the
exception, and they disagree on purpose:

    Presence.from_nullable(0)  # → Present(0)   only None is absent
    Presence.from_truthy(0)    # → ABSENT       every falsy value is absent

from_truthy treats 0, "", [] and False as missing. That is almost never what
numeric or string code wants; reach for from_nullable unless falsiness really
means "nothing here".

    ┌──────────┐    map     ┌──────────┐  flat_map  ┌──────────┐
    │ Present  │───────────→│ Present  │───────────→│ Present  │──→ unwrap_or(...)
    └────┬─────┘            └────┬─────┘            └────┬─────┘
         │ ABSENT                │ ABSENT                │ ABSENT
         └───────────────────────┴───────────────────────┴──→ ABSENT
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

from twotrack.errors import UnwrapError, as_exception

if TYPE_CHECKING:
    from twotrack.outcome import Outcome

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
R = TypeVar("R")

_PRESENCE_KINDS = ("present", "absent")


class Presence(Generic[T]):
    """
    Presence container: Present(value) or ABSENT.

    Every transformation returns a new container; ABSENT skips them all.

        >>> Presence.present(3).map(lambda x: x + 1)
        Present(4)
        >>> ABSENT.map(lambda x: x + 1)
        Absent
    """

    __slots__ = ()

    __presence_kind__: ClassVar[str]

    # ──────────────────────── Introspection ────────────────────────

    def is_present(self) -> bool:
        """Check if this container holds a value."""
        return self.__presence_kind__ == "present"

    def is_absent(self) -> bool:
        """Check if this container is ABSENT."""
        return self.__presence_kind__ == "absent"

    # ──────────────────────── Extraction ────────────────────────

    def unwrap_or(self, fallback: U) -> T | U:
        """Return the value, or `fallback` when absent."""
        match self:
            case Present(v):
                return v
        return fallback

    def unwrap_or_else(self, fn: Callable[[], U]) -> T | U:
        """Return the value, or compute a fallback when absent."""
        match self:
            case Present(v):
                return v
        return fn()

    def unwrap_or_none(self) -> Optional[T]:
        """Return the value, or None when absent."""
        return self.unwrap_or(None)

    def unwrap_or_raise(self, error_factory: Optional[Callable[[], Any]] = None) -> T:
        """
        Return the value, or raise when absent.

        `error_factory()` supplies what gets raised; a non-exception result is
        wrapped in UnwrapError. Without a factory an UnwrapError is raised.

            config.unwrap_or_raise(lambda: KeyError("database"))
        """
        match self:
            case Present(v):
                return v
        if error_factory is None:
            raise UnwrapError("unwrapped an absent value")
        raise as_exception(error_factory())

    def fold(self, on_present: Callable[[T], R], on_absent: Callable[[], R]) -> R:
        """Apply `on_present` to the value, or call `on_absent`."""
        match self:
            case Present(v):
                return on_present(v)
        return on_absent()

    # ──────────────────────── Transformations ────────────────────────

    def or_(self, other: Presence[U]) -> Presence[T | U]:
        """Keep self when present, otherwise take `other`."""
        if self.is_present():
            return self
        return other

    def __or__(self, other: Presence[U]) -> Presence[T | U]:
        return self.or_(other)

    def map(self, fn: Callable[[T], U]) -> Presence[U]:
        match self:
            case Present(v):
                return Present(fn(v))
        return ABSENT

    def flat_map(self, fn: Callable[[T], Presence[U]]) -> Presence[U]:
        """Chain a Presence-returning function. ABSENT short-circuits."""
        match self:
            case Present(v):
                return _checked(fn(v), "flat_map")
        return ABSENT

    async def map_async(self, fn: Callable[[T], Awaitable[U]]) -> Presence[U]:
        """
        Async map: await `fn(value)` and wrap the result.

            avatar = await user.map_async(fetch_avatar)
        """
        match self:
            case Present(v):
                return Present(await fn(v))
        return ABSENT

    async def flat_map_async(self, fn: Callable[[T], Awaitable[Presence[U]]]) -> Presence[U]:
        """Async flat_map: await a Presence-returning coroutine function."""
        match self:
            case Present(v):
                return _checked(await fn(v), "flat_map_async")
        return ABSENT

    def filter(self, predicate: Callable[[T], bool]) -> Presence[T]:
        """Keep the value only if `predicate` holds for it."""
        match self:
            case Present(v) if predicate(v):
                return self
        return ABSENT

    def on_absent_else(self, fn: Callable[[], Presence[U]]) -> Presence[T | U]:
        """
        Fallback hook: when absent, replace self with `fn()`.

            cached.on_absent_else(lambda: lookup_remote(key))
        """
        if self.is_present():
            return self
        return _checked(fn(), "on_absent_else")

    # ──────────────────────── Side Effects ────────────────────────

    def tap(self, fn: Callable[[T], Any]) -> Presence[T]:
        """Run `fn(value)` for its side effect when present."""
        match self:
            case Present(v):
                fn(v)
        return self

    def tap_absent(self, fn: Callable[[], Any]) -> Presence[T]:
        """Run `fn()` for its side effect when absent."""
        if self.is_absent():
            fn()
        return self

    # ──────────────────────── Conversion ────────────────────────

    def to_outcome(self, error_if_absent: E) -> Outcome[T, E]:
        """Present(v) → Success(v); ABSENT → Failure(error_if_absent)."""
        from twotrack.outcome import Outcome

        match self:
            case Present(v):
                return Outcome.success(v)
        return Outcome.failure(error_if_absent)

    def to_outcome_else(self, fn: Callable[[], E]) -> Outcome[T, E]:
        """Like to_outcome, but the error is only built when absent."""
        from twotrack.outcome import Outcome

        match self:
            case Present(v):
                return Outcome.success(v)
        return Outcome.failure(fn())

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def present(value: T) -> Presence[T]:
        return Present(value)

    @staticmethod
    def absent() -> Presence[Any]:
        return ABSENT

    @staticmethod
    def from_truthy(value: T) -> Presence[T]:
        """Present iff `value` is truthy. 0, "" and [] become ABSENT."""
        return Present(value) if value else ABSENT

    @staticmethod
    def from_nullable(value: Optional[T]) -> Presence[T]:
        """Present iff `value` is not None. Falsy values stay present."""
        return ABSENT if value is None else Present(value)

    @staticmethod
    def is_instance(candidate: object) -> bool:
        """
        True for Present and Absent instances.

        Checks the variant discriminant rather than class identity, so
        containers from a reloaded copy of this module are still recognised.
        """
        return getattr(type(candidate), "__presence_kind__", None) in _PRESENCE_KINDS

    @staticmethod
    async def from_awaitable(awaitable: Awaitable[T]) -> Presence[T]:
        """
        Await `awaitable`; Present(result) on success, ABSENT if it raises.

        The exception is discarded. Use Outcome.from_awaitable to keep it.
        """
        try:
            return Present(await awaitable)
        except Exception:
            return ABSENT


@final
@dataclass(frozen=True, slots=True)
class Present(Presence[T]):
    """A value that is there, even when it is falsy."""

    __presence_kind__: ClassVar[str] = "present"

    value: T

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Present({self.value!r})"


@final
class Absent(Presence[Any]):
    """No value. There is exactly one instance: ABSENT."""

    __slots__ = ()

    __presence_kind__: ClassVar[str] = "absent"

    _instance: ClassVar[Optional[Absent]] = None

    def __new__(cls) -> Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Absent"

    def __reduce__(self) -> tuple[type[Absent], tuple[()]]:
        return (Absent, ())


ABSENT: Absent = Absent()


def _checked(candidate: Any, operation: str) -> Presence[Any]:
    if not Presence.is_instance(candidate):
        raise TypeError(
            f"{operation} callback must return a Presence, got {type(candidate).__name__}"
        )
    return candidate


# ──────────────────────── Combinators ────────────────────────


def all_present(*options: Presence[Any]) -> Presence[list[Any]]:
    """
    Collect values while every input is present.

    Returns Present([v1, v2, ...]) in input order, or ABSENT at the first
    absent input.

        all_present(Present(1), Present(2))  # → Present([1, 2])
        all_present(Present(1), ABSENT)      # → ABSENT
    """
    values: list[Any] = []
    for option in options:
        if option.is_absent():
            return ABSENT
        values.append(option.unwrap_or_none())
    return Present(values)


def any_present(*options: Presence[T]) -> Presence[T]:
    """Return the first present input, or ABSENT when none is."""
    for option in options:
        if option.is_present():
            return option
    return ABSENT
