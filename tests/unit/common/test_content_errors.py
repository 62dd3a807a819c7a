import pytest

from common.errors import (
    ContentError,
    ErrorCode,
    NotFoundError,
    StorageConnectionError,
    ValidationError,
)
from common.errors.error_codes import error_code_for_exception, error_code_group


@pytest.mark.parametrize(
    "exc_type, builtin, code",
    [
        (ValidationError, ValueError, ErrorCode.VALIDATION_ERROR),
        (NotFoundError, LookupError, ErrorCode.NOT_FOUND),
        (StorageConnectionError, ConnectionError, ErrorCode.DB_CONNECTION_ERROR),
    ],
)
def test_errors_carry_codes_and_builtin_bases(exc_type, builtin, code):
    exc = exc_type("boom", details={"key": "value"})

    assert isinstance(exc, ContentError)
    assert isinstance(exc, builtin)
    assert exc.code is code
    assert error_code_for_exception(exc) is code
    assert exc.message == "boom"
    assert exc.details == {"key": "value"}


def test_code_resolution_for_foreign_exceptions():
    assert error_code_for_exception(ConnectionRefusedError()) is ErrorCode.DB_CONNECTION_ERROR
    assert error_code_for_exception(RuntimeError()) is ErrorCode.INTERNAL_ERROR


def test_error_code_groups():
    assert error_code_group(ErrorCode.NOT_FOUND) == "VALIDATION"
    assert error_code_group(" DB_CONNECTION_ERROR ") == "DB"
    assert error_code_group("SOMETHING_ELSE") == "INTERNAL"
    assert error_code_group(None) == "INTERNAL"
