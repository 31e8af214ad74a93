# tests/test_result.py
"""Tests for the Ok/Err result values and the returns_result boundary."""

import pytest

from goaltrack.exceptions import (
    ConfigError,
    RecordNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from goaltrack.result import Err, ErrorKind, Ok, returns_result


class TestOk:

    def test_flags_and_unwrap(self):
        result = Ok(5)
        assert result.is_ok is True
        assert result.is_err is False
        assert result.unwrap() == 5
        assert result.unwrap_or(0) == 5

    def test_map(self):
        assert Ok(2).map(lambda v: v * 10) == Ok(20)


class TestErr:

    def test_flags_and_unwrap_or(self):
        result = Err(ErrorKind.NOT_FOUND, "Goal with id:x not found")
        assert result.is_ok is False
        assert result.is_err is True
        assert result.unwrap_or("fallback") == "fallback"

    def test_map_is_noop(self):
        err = Err(ErrorKind.UNAUTHORIZED, "no")
        assert err.map(lambda v: v * 10) is err

    def test_unwrap_reraises_original(self):
        original = RecordNotFoundError("Goal", "x")
        err = Err.from_exception(original)
        assert err.kind is ErrorKind.NOT_FOUND
        assert err.message == "Goal with id:x not found"
        with pytest.raises(RecordNotFoundError) as exc_info:
            err.unwrap()
        assert exc_info.value is original

    @pytest.mark.parametrize(
        "kind, exc_type",
        [
            (ErrorKind.VALIDATION_ERROR, ValidationError),
            (ErrorKind.NOT_FOUND, RecordNotFoundError),
            (ErrorKind.UNAUTHORIZED, UnauthorizedError),
        ],
    )
    def test_unwrap_without_original_builds_matching_exception(self, kind, exc_type):
        with pytest.raises(exc_type, match="boom"):
            Err(kind, "boom").unwrap()

    def test_equality_ignores_original_exception(self):
        a = Err.from_exception(UnauthorizedError("Goal"))
        b = Err(ErrorKind.UNAUTHORIZED, "You are not authorized to access Goal")
        assert a == b

    def test_kind_is_string_enum(self):
        assert Err(ErrorKind.NOT_FOUND, "x").kind == "NOT_FOUND"


class TestReturnsResult:

    def test_wraps_return_value(self):
        @returns_result
        def ok():
            return [1, 2]

        assert ok() == Ok([1, 2])

    def test_converts_expected_errors(self):
        @returns_result
        def fails():
            raise ValidationError(missing_fields=["title"])

        result = fails()
        assert result.is_err
        assert result.kind is ErrorKind.VALIDATION_ERROR
        assert result.error.missing_fields == ("title",)

    def test_other_errors_propagate(self):
        @returns_result
        def broken():
            raise ConfigError("bad")

        with pytest.raises(ConfigError):
            broken()

    def test_preserves_metadata(self):
        @returns_result
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
