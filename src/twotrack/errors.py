"""
UnwrapError — the one exception the containers raise on their own.

Python can only raise BaseException instances, so when a stored payload that
is not an exception has to cross the throwing boundary it travels inside an
UnwrapError. Exception payloads are raised unchanged.

    >>> err = UnwrapError("missing")
    >>> err.payload
    'missing'
"""

from __future__ import annotations

from typing import Any, Callable, NoReturn, Optional


class UnwrapError(Exception):
    """Raised by unwrap_or_raise / unwrap_error_or_raise for non-exception payloads."""

    def __init__(self, payload: Any) -> None:
        super().__init__(str(payload))
        self.payload = payload


def as_exception(payload: Any) -> BaseException:
    """Return payload itself if it is raisable, otherwise wrap it in UnwrapError."""
    if isinstance(payload, BaseException):
        return payload
    return UnwrapError(payload)


def raise_payload(payload: Any, transform: Optional[Callable[..., Any]] = None) -> NoReturn:
    """
    Raise `transform(payload)` or, without a transform, the payload itself.

    Whatever ends up being raised goes through as_exception first.
    """
    if transform is None:
        raise as_exception(payload)
    raise as_exception(transform(payload))
