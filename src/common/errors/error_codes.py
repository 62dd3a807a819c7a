"""Canonical error-code taxonomy for storage and document flows."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Bounded canonical error codes for external contracts and observability."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DB_CONNECTION_ERROR = "DB_CONNECTION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_CODE_GROUPS: dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "VALIDATION",
    ErrorCode.NOT_FOUND: "VALIDATION",
    ErrorCode.DB_CONNECTION_ERROR: "DB",
    ErrorCode.INTERNAL_ERROR: "INTERNAL",
}


def error_code_group(code: ErrorCode | str | None) -> str:
    """Return the coarse group for an error code, INTERNAL when unknown."""
    if isinstance(code, ErrorCode):
        return _CODE_GROUPS[code]
    try:
        normalized = ErrorCode(str(code or "").strip())
    except ValueError:
        return _CODE_GROUPS[ErrorCode.INTERNAL_ERROR]
    return _CODE_GROUPS[normalized]


def error_code_for_exception(exc: BaseException) -> ErrorCode:
    """Resolve the canonical code carried by an exception."""
    code = getattr(exc, "code", None)
    if isinstance(code, ErrorCode):
        return code
    if isinstance(exc, ConnectionError):
        return ErrorCode.DB_CONNECTION_ERROR
    return ErrorCode.INTERNAL_ERROR
