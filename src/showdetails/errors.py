from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    INVALID_INPUT = "INVALID_INPUT"


class ShowDetailsError(Exception):
    """Raised for all expected failure conditions.

    Fetch failures (``PAGE_NOT_FOUND``, ``PAGE_FETCH_FAILED``) are caught by
    the content sources and turned into a "not found" result. Only
    ``NOT_IMPLEMENTED`` and ``INVALID_INPUT`` ever reach a caller of the
    show-details service; server.py serialises them into an error response.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


def not_implemented(operation: str, source_name: str) -> ShowDetailsError:
    """Build the error raised by write operations no content source supports."""
    return ShowDetailsError(
        code=ErrorCode.NOT_IMPLEMENTED,
        message=f"{operation} is not implemented for the '{source_name}' show details source.",
        suggestion="Show details are read-only; edit the upstream content directly.",
        recoverable=False,
    )
