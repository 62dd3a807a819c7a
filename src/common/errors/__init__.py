"""Common error taxonomy helpers."""

from common.errors.error_codes import ErrorCode, error_code_for_exception, error_code_group
from common.errors.exceptions import (
    ContentError,
    NotFoundError,
    StorageConnectionError,
    ValidationError,
)

__all__ = [
    "ContentError",
    "ErrorCode",
    "NotFoundError",
    "StorageConnectionError",
    "ValidationError",
    "error_code_for_exception",
    "error_code_group",
]
