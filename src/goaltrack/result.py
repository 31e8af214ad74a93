# src/goaltrack/result.py
"""
Tagged success/failure values returned by every public store operation.

A store operation returns either ``Ok(value)`` or ``Err(kind, message)``.
Callers branch on ``is_ok``/``is_err`` (or on ``Err.kind``); nothing is thrown
past the store boundary for the expected failure kinds.

Example:
    >>> result = goals.get_goal(caller, goal_id)
    >>> if result.is_ok:
    ...     print(result.value.title)
    ... elif result.kind is ErrorKind.NOT_FOUND:
    ...     print(result.message)
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

from .exceptions import (
    GoalTrackError,
    RecordNotFoundError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(str, Enum):
    """The failure tags an operation can return."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    STORAGE_ERROR = "STORAGE_ERROR"


_EXCEPTION_FACTORIES: dict[ErrorKind, Callable[[str], GoalTrackError]] = {
    ErrorKind.VALIDATION_ERROR: lambda msg: ValidationError(message=msg),
    ErrorKind.NOT_FOUND: lambda msg: RecordNotFoundError("Record", "", message=msg),
    ErrorKind.UNAUTHORIZED: lambda msg: UnauthorizedError("Record", message=msg),
    ErrorKind.STORAGE_ERROR: lambda msg: StorageError(msg),
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    is_ok = True
    is_err = False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err:
    """
    Failed outcome.

    Attributes:
        kind: Which of the failure tags applies.
        message: Human-readable reason, suitable for returning to a caller.
        error: The exception that produced this value, if any. Not part of
            equality so that two ``Err`` values with the same tag and message
            compare equal.
    """

    kind: ErrorKind
    message: str
    error: GoalTrackError | None = field(default=None, compare=False, repr=False)

    is_ok = False
    is_err = True

    @classmethod
    def from_exception(cls, exc: GoalTrackError) -> Err:
        return cls(kind=ErrorKind(exc.kind), message=exc.message, error=exc)

    def unwrap(self) -> Any:
        """Raise the exception matching this failure."""
        if self.error is not None:
            raise self.error
        raise _EXCEPTION_FACTORIES[self.kind](self.message)

    def unwrap_or(self, default: Any) -> Any:
        return default

    def map(self, fn: Callable[[Any], Any]) -> Err:
        return self


Result = Union[Ok[T], Err]


def returns_result(fn: Callable[..., T]) -> Callable[..., Result[T]]:
    """
    Wrap a store method so its return value becomes ``Ok`` and any expected
    goaltrack exception becomes ``Err``.

    Only validation, not-found, authorization and storage errors are converted.
    Anything else is a programming error and propagates unchanged.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Result[T]:
        try:
            return Ok(fn(*args, **kwargs))
        except (ValidationError, RecordNotFoundError, UnauthorizedError, StorageError) as exc:
            return Err.from_exception(exc)

    return wrapper
