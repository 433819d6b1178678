"""
twotrack — Outcome and Presence containers for Python.

Fallible and optional computations as values: no exceptions in the happy
path, no None checks scattered through it.

    from twotrack import Outcome, Presence, success, failure

    def parse_age(raw: str) -> Outcome[int, str]:
        return Outcome.from_throwing(lambda: int(raw)).map_error(
            lambda e: f"not a number: {raw!r}"
        )

    label = (
        parse_age("42")
        .flat_map(lambda age: success(age) if age >= 0 else failure("negative age"))
        .map(lambda age: f"age {age}")
        .unwrap_or("unknown")
    )
"""

from twotrack.presence import ABSENT, Absent, Present, Presence, all_present, any_present
from twotrack.outcome import Failure, Outcome, Success, all_of, any_of
from twotrack.async_outcome import AsyncOutcome
from twotrack.errors import UnwrapError
from twotrack.execution import (
    ExecutionContext,
    NoOpExecutionContext,
    LoggingExecutionContext,
    ComposableExecutionContext,
    with_context,
)
from twotrack.assertions import OutcomeAssertions, PresenceAssertions

success = Outcome.success
failure = Outcome.failure
present = Presence.present

__all__ = [
    "Outcome",
    "Success",
    "Failure",
    "AsyncOutcome",
    "Presence",
    "Present",
    "Absent",
    "ABSENT",
    "success",
    "failure",
    "present",
    "all_of",
    "any_of",
    "all_present",
    "any_present",
    "UnwrapError",
    "ExecutionContext",
    "NoOpExecutionContext",
    "LoggingExecutionContext",
    "ComposableExecutionContext",
    "with_context",
    "OutcomeAssertions",
    "PresenceAssertions",
]

__version__ = "1.0.0"
