"""
Exception hierarchy for the media catalog data-access layer.

Every failure that leaves the service layer is an ApplicationError tagged
with an ErrorKind. Lower-level failures are kept as ``cause`` (and chained
as ``__cause__``) so the full chain can be inspected and rendered.

Dependencies: None (pure domain layer)
System role: Centralized error taxonomy across the application
"""

from collections.abc import Iterator, Mapping
from enum import Enum
from http import HTTPStatus
from types import MappingProxyType
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Stable application error kinds."""

    APPLICATION = "application"
    REPOSITORY = "repository"
    INSUFFICIENT_DATA = "insufficient_data"
    EXCESS_DATA = "excess_data"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONCURRENCY = "concurrency"
    NOT_MODIFIED = "not_modified"
    HTTP = "http"


class ApplicationError(Exception):
    """Base exception for all media catalog application errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.APPLICATION
    default_message: ClassVar[str] = "An unexpected application error occurred."

    def __init__(
        self,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Initialize error with message, optional cause and diagnostic data.

        Args:
            message: Human-readable error message (class default if None)
            cause: Lower-level error that triggered this one
            data: Key/value pairs of diagnostic context

        """
        self.message = message or self.default_message
        self.cause = cause
        self.data: Mapping[str, Any] = MappingProxyType(dict(data or {}))
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return string representation including data."""
        if self.data:
            return f"{self.message} | Data: {dict(self.data)}"
        return self.message


class RepositoryError(ApplicationError):
    """Raised by the repository for every storage-layer failure."""

    kind = ErrorKind.REPOSITORY
    default_message = "An error occurred while accessing the repository."


class InsufficientDataError(ApplicationError):
    """Raised when a payload lacks a property the action requires."""

    kind = ErrorKind.INSUFFICIENT_DATA
    default_message = "Insufficient data provided."


class ExcessDataError(ApplicationError):
    """Raised when a payload carries properties outside the allowed set."""

    kind = ErrorKind.EXCESS_DATA
    default_message = "Too much data provided."


class ValidationError(ApplicationError):
    """Raised when a field value or identifier has an invalid format."""

    kind = ErrorKind.VALIDATION
    default_message = "The provided data is invalid or in incorrect format."


class NotFoundError(ApplicationError):
    """Raised when no document matches the id or filter."""

    kind = ErrorKind.NOT_FOUND
    default_message = "The data could not be found."


class ConcurrencyError(ApplicationError):
    """Raised on a version mismatch during save or delete."""

    kind = ErrorKind.CONCURRENCY
    default_message = "A concurrency conflict occurred while accessing shared resources."


class NotModifiedError(ApplicationError):
    """Raised when an update or replace would not change the document."""

    kind = ErrorKind.NOT_MODIFIED
    default_message = "No changes have been detected."


class HttpError(ApplicationError):
    """Error already bound to an HTTP status code."""

    kind = ErrorKind.HTTP

    def __init__(
        self,
        status: int,
        message: str | None = None,
        *,
        cause: BaseException | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Initialize HTTP error.

        Args:
            status: HTTP status code
            message: Error message (reason phrase if None)
            cause: Error being rendered
            data: Additional context
        """
        self.status = int(status)
        super().__init__(message or self.reason_phrase, cause=cause, data=data)

    @property
    def reason_phrase(self) -> str:
        """Standard reason phrase for the status code."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown Error"


def get_cause(error: BaseException) -> BaseException | None:
    """Return the wrapped inner error, preferring the explicit ``cause``."""
    cause = getattr(error, "cause", None)
    if isinstance(cause, BaseException):
        return cause
    return error.__cause__


def iter_error_chain(error: BaseException) -> Iterator[BaseException]:
    """
    Yield the error followed by each wrapped cause, outermost first.

    Stops when a cause repeats, so cyclic chains terminate.
    """
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = get_cause(current)


def find_error_of_type(
    error: BaseException,
    error_types: type[BaseException] | tuple[type[BaseException], ...],
) -> BaseException | None:
    """Return the first error in the cause chain that is an instance of ``error_types``."""
    for candidate in iter_error_chain(error):
        if isinstance(candidate, error_types):
            return candidate
    return None


def has_error_of_type(
    error: BaseException,
    error_types: type[BaseException] | tuple[type[BaseException], ...],
) -> bool:
    """
    Check if an error, or any error it wraps, is of the given type.

    Args:
        error: Outermost error
        error_types: Exception class or tuple of classes to look for

    Returns:
        bool: True if found anywhere in the cause chain
    """
    return find_error_of_type(error, error_types) is not None
