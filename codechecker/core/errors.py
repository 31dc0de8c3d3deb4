"""
Error handling - application exception classes.

Every application error carries a machine readable code, a message, optional
details and the HTTP status the API layer should answer with.
"""
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status


class ErrorCode(str, Enum):
    """Error codes."""
    # Client errors
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_INPUT = "INVALID_INPUT"
    INPUT_TOO_LARGE = "INPUT_TOO_LARGE"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Business logic errors
    COMPARISON_FAILED = "COMPARISON_FAILED"


class BaseApplicationError(Exception):
    """Base class of all application errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


# Client errors (4xx)
class InvalidRequestError(BaseApplicationError):
    """Malformed request."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_REQUEST,
            details=details,
            status_code=status.HTTP_400_BAD_REQUEST
        )


class InvalidInputError(BaseApplicationError):
    """Input failed validation."""
    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_INPUT,
            details=details,
            status_code=422
        )


class InputTooLargeError(BaseApplicationError):
    """A submission or a submission pair exceeds the configured size ceiling."""
    def __init__(self, message: str, size: int, limit: int):
        super().__init__(
            message=message,
            error_code=ErrorCode.INPUT_TOO_LARGE,
            details={"size": size, "limit": limit},
            status_code=413
        )


# Server errors (5xx)
class ComparisonError(BaseApplicationError):
    """A comparison run could not be carried out."""
    def __init__(self, message: str, pair: Optional[tuple[str, str]] = None):
        details = {}
        if pair:
            details["pair"] = list(pair)

        super().__init__(
            message=f"Comparison failed: {message}",
            error_code=ErrorCode.COMPARISON_FAILED,
            details=details,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
