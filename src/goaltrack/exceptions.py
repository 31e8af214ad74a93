# src/goaltrack/exceptions.py
"""
Custom exceptions for the goaltrack library.

This module defines the exception hierarchy raised inside the stores. Public
store operations never let these escape: the ``returns_result`` boundary in
:mod:`goaltrack.result` converts each one into an ``Err`` tagged with the
exception's ``kind``. ``Result.unwrap()`` raises them again for callers who
prefer exceptions.
"""

from typing import Iterable, Optional


class GoalTrackError(Exception):
    """Base class for all goaltrack specific errors."""
    kind: str = "GOALTRACK_ERROR"

    def __init__(self, message: str = "An unspecified error occurred in goaltrack."):
        self.message = message
        super().__init__(message)


class ValidationError(GoalTrackError):
    """Raised when a required payload field is missing or empty."""
    kind = "VALIDATION_ERROR"

    def __init__(self, missing_fields: Iterable[str] = (), message: str = "Missing or invalid input data"):
        self.missing_fields = tuple(missing_fields)
        super().__init__(message)


class RecordNotFoundError(GoalTrackError):
    """Raised when a Goal or Milestone id is absent from its collection."""
    kind = "NOT_FOUND"

    def __init__(self, record_type: str, record_id: str, message: Optional[str] = None):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(message or f"{record_type} with id:{record_id} not found")


class UnauthorizedError(GoalTrackError):
    """Raised when the caller may not access the referenced record."""
    kind = "UNAUTHORIZED"

    def __init__(self, record_type: str, message: Optional[str] = None):
        self.record_type = record_type
        super().__init__(message or f"You are not authorized to access {record_type}")


class StorageError(GoalTrackError):
    """Base class for errors raised by a record storage backend."""
    kind = "STORAGE_ERROR"

    def __init__(self, message: str = "Storage error."):
        super().__init__(message)


class StorageCapacityError(StorageError):
    """
    Raised when a key or serialized value exceeds the size limits the
    backend was initialized with. Nothing is written.
    """
    def __init__(self, what: str, size: int, limit: int):
        self.what = what
        self.size = size
        self.limit = limit
        super().__init__(f"Storage {what} size {size} bytes exceeds limit of {limit} bytes.")


class StorageCorruptedError(StorageError):
    """Raised when persisted data cannot be decoded."""
    def __init__(self, message: str = "Stored data is corrupted."):
        super().__init__(message)


class ConfigError(GoalTrackError):
    """Raised for errors related to configuration loading or validation."""
    kind = "CONFIG_ERROR"

    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)
