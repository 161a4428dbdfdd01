"""
Result pattern shared by every service.

Domain operations never raise for control flow: they hand back a ``Result``
that is either a success carrying a value or a failure carrying an
``ErrorKind`` and a human-readable message. Routes translate failures into
HTTP errors with :func:`skillswap.core.errors.raise_for_result`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar


T = TypeVar('T')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorKind(Enum):
    """Where a failure came from."""
    NOT_FOUND = "not_found"
    DUPLICATE_REQUEST = "duplicate_request"
    VALIDATION_FAILURE = "validation_failure"
    BACKEND_FAILURE = "backend_failure"
    INVALID_STATE = "invalid_state"
    FORBIDDEN = "forbidden"


@dataclass
class Result(Generic[T]):
    """
    Outcome of a domain operation.

    Attributes:
        status: SUCCESS or FAILURE
        value: The value on success (None on failure)
        kind: The error kind on failure (None on success)
        message: Human-readable description, always set on failure
        error: The exception behind a BACKEND_FAILURE, if any

    Examples:
        >>> result = Result.success(42)
        >>> result.is_success
        True
        >>> result = Result.failure(ErrorKind.NOT_FOUND, "User not found")
        >>> result.message
        'User not found'
    """

    status: ResultStatus
    value: Optional[T] = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T = None, message: Optional[str] = None) -> 'Result[T]':
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        return cls(status=ResultStatus.FAILURE, kind=kind, message=message, error=error)

    @classmethod
    def not_found(cls, message: str) -> 'Result[T]':
        return cls.failure(ErrorKind.NOT_FOUND, message)

    @classmethod
    def invalid(cls, message: str) -> 'Result[T]':
        return cls.failure(ErrorKind.VALIDATION_FAILURE, message)

    @classmethod
    def backend(cls, error: Exception) -> 'Result[T]':
        return cls.failure(ErrorKind.BACKEND_FAILURE, str(error) or error.__class__.__name__, error)

    def unwrap(self) -> T:
        """
        Return the value of a success.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot unwrap failure result: {self.message}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.is_success else default
