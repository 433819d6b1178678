"""
Test assertions for Outcome and Presence values.

Expressive assert helpers that say which variant was expected and what was
found instead.

Usage in tests:
    from twotrack import OutcomeAssertions

    def test_create_user():
        outcome = create_user(valid_command)
        user = OutcomeAssertions.assert_success(outcome)
        assert user.name == "Alice"

    def test_invalid_email():
        outcome = create_user(bad_command)
        OutcomeAssertions.assert_failure_equals(outcome, "invalid email")
"""

from __future__ import annotations

from typing import Any, TypeVar

from twotrack.outcome import Outcome
from twotrack.presence import Presence

T = TypeVar("T")
E = TypeVar("E")


class OutcomeAssertions:
    """Expressive test assertions for Outcome values."""

    @staticmethod
    def assert_success(outcome: Outcome[T, E], message: str = "") -> T:
        """
        Assert the Outcome is a Success and return the value.

            value = OutcomeAssertions.assert_success(outcome)
        """
        context = f" — {message}" if message else ""
        assert outcome.is_success(), (
            f"Expected Success but got Failure({outcome.unsafe_unwrap()!r}){context}"
        )
        return outcome.unsafe_unwrap()  # type: ignore[return-value]

    @staticmethod
    def assert_failure(outcome: Outcome[T, E], message: str = "") -> E:
        """Assert the Outcome is a Failure and return the error."""
        context = f" — {message}" if message else ""
        assert outcome.is_failure(), (
            f"Expected Failure but got Success({outcome.unsafe_unwrap()!r}){context}"
        )
        return outcome.unsafe_unwrap()  # type: ignore[return-value]

    @staticmethod
    def assert_success_value(outcome: Outcome[T, E], expected_value: Any) -> None:
        """Assert the Outcome is a Success with the specific value."""
        value = OutcomeAssertions.assert_success(outcome)
        assert value == expected_value, (
            f"Expected success value {expected_value!r} but got {value!r}"
        )

    @staticmethod
    def assert_failure_equals(outcome: Outcome[T, E], expected_error: Any) -> None:
        """Assert the Outcome is a Failure carrying exactly `expected_error`."""
        error = OutcomeAssertions.assert_failure(outcome)
        assert error == expected_error, (
            f"Expected failure error {expected_error!r} but got {error!r}"
        )

    @staticmethod
    def assert_failure_message_contains(outcome: Outcome[T, E], substring: str) -> None:
        """Assert that str(error) contains `substring`, case-insensitively."""
        error = OutcomeAssertions.assert_failure(outcome)
        assert substring.lower() in str(error).lower(), (
            f"Expected failure to contain {substring!r} but error was: {error!r}"
        )


class PresenceAssertions:
    """Expressive test assertions for Presence values."""

    @staticmethod
    def assert_present(option: Presence[T], message: str = "") -> T:
        """Assert the Presence holds a value and return it."""
        context = f" — {message}" if message else ""
        assert option.is_present(), f"Expected Present but got Absent{context}"
        return option.unwrap_or_raise()

    @staticmethod
    def assert_absent(option: Presence[T], message: str = "") -> None:
        context = f" — {message}" if message else ""
        assert option.is_absent(), (
            f"Expected Absent but got Present({option.unwrap_or_none()!r}){context}"
        )

    @staticmethod
    def assert_present_value(option: Presence[T], expected_value: Any) -> None:
        """Assert the Presence holds exactly `expected_value`."""
        value = PresenceAssertions.assert_present(option)
        assert value == expected_value, (
            f"Expected present value {expected_value!r} but got {value!r}"
        )
