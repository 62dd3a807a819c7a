"""Exceptions raised by the content-persistence core."""

from typing import Any, Dict, Optional

from common.errors.error_codes import ErrorCode


class ContentError(Exception):
    """Base class for errors reported to callers of the content core."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize with a caller-facing message and optional structured details."""
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ContentError, ValueError):
    """Raised when a request is rejected before touching storage."""

    code = ErrorCode.VALIDATION_ERROR


class NotFoundError(ContentError, LookupError):
    """Raised when the referenced document, locale or status does not exist."""

    code = ErrorCode.NOT_FOUND


class StorageConnectionError(ContentError, ConnectionError):
    """Raised when the relational store cannot be reached."""

    code = ErrorCode.DB_CONNECTION_ERROR
