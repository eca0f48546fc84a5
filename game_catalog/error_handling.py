"""
Common error handling utilities for the game catalog package.

Every component raises a ``CatalogException`` subclass tagged with an
``ErrorKind``. At the pipeline and service boundary those exceptions are turned
into ``CatalogError`` values, so callers never see raw transport or database
exceptions.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Failure classes surfaced to callers."""
    NOT_FOUND = "Not Found"
    MALFORMED = "Malformed"
    RATE_LIMITED = "Rate Limited"
    SERVER_FAULT = "Server Fault"
    CLIENT_FAULT = "Client Fault"
    TRANSPORT_FAULT = "Transport Fault"
    REPOSITORY_FAULT = "Repository Fault"
    INVALID_PARAMETERS = "Invalid Parameters"

    @property
    def transient(self) -> bool:
        """Whether a caller may retry this failure with backoff."""
        return self in (ErrorKind.RATE_LIMITED, ErrorKind.SERVER_FAULT, ErrorKind.TRANSPORT_FAULT)


@dataclass(frozen=True)
class CatalogError:
    """Structured error value returned across the pipeline boundary."""
    kind: ErrorKind
    message: str
    identifier: Optional[int] = None

    def to_dict(self) -> dict:
        data = {"type": self.kind.value, "message": self.message}
        if self.identifier is not None:
            data["id"] = self.identifier
        return data


class CatalogException(Exception):
    """Base exception for the package."""
    kind = ErrorKind.TRANSPORT_FAULT

    def __init__(self, message: str, identifier: Optional[int] = None,
                 kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        self.identifier = identifier
        if kind is not None:
            self.kind = kind

    def to_error(self) -> CatalogError:
        return CatalogError(self.kind, self.message, self.identifier)


class ParseError(CatalogException):
    """Raised by the markup parsers."""
    kind = ErrorKind.MALFORMED


class GameNotFoundError(ParseError):
    """The document explicitly signals an unknown identifier."""
    kind = ErrorKind.NOT_FOUND


class MalformedDocumentError(ParseError):
    """Required fields are missing or not coercible to their type."""
    kind = ErrorKind.MALFORMED


class RepositoryError(CatalogException):
    kind = ErrorKind.REPOSITORY_FAULT


class InvalidParametersError(CatalogException):
    kind = ErrorKind.INVALID_PARAMETERS


_EXCEPTION_TYPES = {
    ErrorKind.NOT_FOUND: GameNotFoundError,
    ErrorKind.MALFORMED: MalformedDocumentError,
    ErrorKind.REPOSITORY_FAULT: RepositoryError,
    ErrorKind.INVALID_PARAMETERS: InvalidParametersError,
}


def to_catalog_error(exc: Exception, identifier: Optional[int] = None,
                     default_kind: ErrorKind = ErrorKind.TRANSPORT_FAULT) -> CatalogError:
    """Convert any exception into a ``CatalogError`` value."""
    if isinstance(exc, CatalogException):
        error = exc.to_error()
        if error.identifier is None and identifier is not None:
            error = CatalogError(error.kind, error.message, identifier)
        return error
    return CatalogError(default_kind, str(exc) or exc.__class__.__name__, identifier)


def translate_errors(kind: ErrorKind, log_error: bool = True):
    """
    Decorator re-raising unexpected exceptions as ``CatalogException`` of ``kind``.

    Args:
        kind: Error kind assigned to anything that is not already a CatalogException
        log_error: Whether to log the error
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except CatalogException:
                raise
            except Exception as e:
                if log_error:
                    logger.error(f"Error in {func.__name__}: {e}")
                exc_type = _EXCEPTION_TYPES.get(kind, CatalogException)
                raise exc_type(f"{func.__name__} failed: {e}", kind=kind) from e
        return wrapper
    return decorator


def safe_execute(func: Callable, *args, identifier: Optional[int] = None,
                 error_kind: ErrorKind = ErrorKind.TRANSPORT_FAULT,
                 error_msg: Optional[str] = None, **kwargs) -> Tuple[Any, Optional[CatalogError]]:
    """
    Safely execute a function, returning its result alongside any error.

    Args:
        func: Function to execute
        *args: Arguments for the function
        identifier: Identifier attached to the resulting error
        error_kind: Kind assigned to exceptions that carry none
        error_msg: Custom log message prefix
        **kwargs: Keyword arguments for the function

    Returns:
        ``(result, None)`` on success or ``(None, CatalogError)`` on error
    """
    try:
        return func(*args, **kwargs), None
    except Exception as e:
        if error_msg:
            logger.error(f"{error_msg}: {e}")
        else:
            logger.error(f"Error in {getattr(func, '__name__', func)}: {e}")
        return None, to_catalog_error(e, identifier, error_kind)
