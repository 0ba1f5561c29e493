"""Error codes and exception types shared across the engine."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORE_QUERY_FAILED = "STORE_QUERY_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "Invalid request data",
    ErrorCode.STORE_QUERY_FAILED: "Failed to read historical records",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred",
}


class InsightsError(Exception):
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str | None = None, *, details: Any = None):
        self.message = message or ERROR_MESSAGES[self.code]
        self.details = details
        self.timestamp = datetime.now(UTC)
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_exception(cls, exc: BaseException) -> InsightsError:
        """Wrap an arbitrary exception, passing InsightsError instances through."""
        if isinstance(exc, InsightsError):
            return exc
        return cls(str(exc) or None, details={"type": type(exc).__name__})


class StoreQueryError(InsightsError):
    code = ErrorCode.STORE_QUERY_FAILED


class InvalidRequestError(InsightsError):
    code = ErrorCode.VALIDATION_ERROR
