"""Tests for the error taxonomy and helpers."""

import pytest

from game_catalog.error_handling import (
    CatalogError,
    ErrorKind,
    GameNotFoundError,
    InvalidParametersError,
    RepositoryError,
    safe_execute,
    to_catalog_error,
    translate_errors,
)


def test_transient_kinds() -> None:
    assert ErrorKind.RATE_LIMITED.transient
    assert ErrorKind.SERVER_FAULT.transient
    assert ErrorKind.TRANSPORT_FAULT.transient
    assert not ErrorKind.NOT_FOUND.transient
    assert not ErrorKind.CLIENT_FAULT.transient


def test_error_value_to_dict() -> None:
    error = CatalogError(ErrorKind.NOT_FOUND, "The requested bggid of 5 could not be found.", 5)
    assert error.to_dict() == {"type": "Not Found", "message": "The requested bggid of 5 could not be found.", "id": 5}
    assert "id" not in CatalogError(ErrorKind.MALFORMED, "bad").to_dict()


def test_to_catalog_error_keeps_kind_and_fills_identifier() -> None:
    error = to_catalog_error(GameNotFoundError("gone"), identifier=12)
    assert error == CatalogError(ErrorKind.NOT_FOUND, "gone", 12)


def test_to_catalog_error_for_foreign_exception() -> None:
    error = to_catalog_error(KeyError("x"), default_kind=ErrorKind.REPOSITORY_FAULT)
    assert error.kind is ErrorKind.REPOSITORY_FAULT


def test_translate_errors_wraps_unexpected_exceptions() -> None:
    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def broken():
        raise OSError("disk full")

    with pytest.raises(RepositoryError) as exc_info:
        broken()
    assert "disk full" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, OSError)


def test_translate_errors_passes_catalog_exceptions_through() -> None:
    @translate_errors(ErrorKind.REPOSITORY_FAULT)
    def invalid():
        raise InvalidParametersError("nope")

    with pytest.raises(InvalidParametersError):
        invalid()


def test_safe_execute_success_and_failure() -> None:
    assert safe_execute(lambda x: x * 2, 4) == (8, None)

    def fail():
        raise ValueError("boom")

    value, error = safe_execute(fail, identifier=3, error_kind=ErrorKind.MALFORMED)
    assert value is None
    assert error == CatalogError(ErrorKind.MALFORMED, "boom", 3)
