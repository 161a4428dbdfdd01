"""
Tests for Result helpers and their HTTP translation.
"""

import pytest
from fastapi import HTTPException

from skillswap.core.errors import raise_for_result
from skillswap.core.result import ErrorKind, Result


class TestResult:
    """Test cases for Result."""

    def test_success(self):
        result = Result.success(42)

        assert result.is_success
        assert not result.is_failure
        assert result.unwrap() == 42
        assert result.unwrap_or(0) == 42

    def test_failure(self):
        result = Result.not_found("User not found")

        assert result.is_failure
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.unwrap_or("fallback") == "fallback"
        with pytest.raises(ValueError, match="User not found"):
            result.unwrap()

    def test_backend_keeps_exception(self):
        error = RuntimeError("connection reset")
        result = Result.backend(error)

        assert result.kind == ErrorKind.BACKEND_FAILURE
        assert result.error is error
        assert result.message == "connection reset"


class TestRaiseForResult:
    """Test cases for raise_for_result."""

    def test_success_returns_value(self):
        assert raise_for_result(Result.success("ok")) == "ok"

    @pytest.mark.parametrize("kind, code", [
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.DUPLICATE_REQUEST, 409),
        (ErrorKind.INVALID_STATE, 409),
        (ErrorKind.VALIDATION_FAILURE, 400),
        (ErrorKind.FORBIDDEN, 403),
    ])
    def test_status_codes(self, kind, code):
        with pytest.raises(HTTPException) as exc_info:
            raise_for_result(Result.failure(kind, "nope"))

        assert exc_info.value.status_code == code
        assert exc_info.value.detail == "nope"

    def test_backend_details_are_hidden(self):
        with pytest.raises(HTTPException) as exc_info:
            raise_for_result(Result.backend(RuntimeError("password=hunter2")))

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Internal server error"
