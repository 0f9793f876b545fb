"""
Error translation for the HTTP boundary.

Maps application error kinds to HTTP status codes and renders failure
payloads. Outside production the payload carries the whole causal chain;
in production it carries only status and message.

Dependencies: pydantic
System role: Error kind to HTTP status mapping and payload rendering
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from catalog.core.exceptions import (
    ApplicationError,
    ErrorKind,
    HttpError,
    get_cause,
)

ERROR_STATUS: Mapping[ErrorKind, int] = MappingProxyType(
    {
        ErrorKind.INSUFFICIENT_DATA: 400,  # Bad Request
        ErrorKind.EXCESS_DATA: 400,  # Bad Request
        ErrorKind.VALIDATION: 400,  # Bad Request
        ErrorKind.NOT_FOUND: 404,  # Not Found
        ErrorKind.CONCURRENCY: 409,  # Conflict
        ErrorKind.NOT_MODIFIED: 304,  # Not Modified
        ErrorKind.REPOSITORY: 500,
        ErrorKind.APPLICATION: 500,
    }
)

DEFAULT_STATUS = 500

_MAX_DEPTH = 16


def status_for(error: BaseException) -> int:
    """
    Resolve the HTTP status code for an error.

    Args:
        error: Any exception

    Returns:
        int: Status from the kind table, the error's own status for
            HttpError, 500 otherwise
    """
    if isinstance(error, HttpError):
        return error.status
    if isinstance(error, ApplicationError):
        return ERROR_STATUS.get(error.kind, DEFAULT_STATUS)
    return DEFAULT_STATUS


def convert_to_http_error(error: BaseException) -> HttpError:
    """Wrap an error in an HttpError carrying its mapped status."""
    if isinstance(error, HttpError):
        return error
    return HttpError(status_for(error), cause=error)


def _safe_value(value: Any, seen: set[int], depth: int = 0) -> Any:
    """Convert diagnostic data into JSON-friendly values, breaking cycles."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if depth >= _MAX_DEPTH:
        return "[MaxDepth]"
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        if id(value) in seen:
            return "[Circular]"
        seen = seen | {id(value)}
        if isinstance(value, Mapping):
            return {str(key): _safe_value(item, seen, depth + 1) for key, item in value.items()}
        return [_safe_value(item, seen, depth + 1) for item in value]
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _safe_value(to_dict(), seen, depth + 1)
    return str(value)


def describe_error(error: BaseException) -> dict[str, Any]:
    """
    Describe an error and its causes as nested dictionaries.

    A cause that already appeared higher in the chain is rendered as a
    ``{"name": ..., "circular": True}`` marker instead of being repeated.
    """
    root: dict[str, Any] = {}
    node = root
    seen: set[int] = set()
    current: BaseException | None = error
    depth = 0
    while current is not None:
        if id(current) in seen or depth >= _MAX_DEPTH:
            node.update({"name": type(current).__name__, "circular": True})
            break
        seen.add(id(current))
        node["name"] = type(current).__name__
        node["message"] = getattr(current, "message", None) or str(current)
        if isinstance(current, ApplicationError) and current.data:
            node["data"] = _safe_value(current.data, set())
        if isinstance(current, PydanticValidationError):
            node["errors"] = _safe_value(
                current.errors(include_url=False, include_context=False, include_input=False),
                set(),
            )
        current = get_cause(current)
        depth += 1
        if current is not None:
            node["cause"] = {}
            node = node["cause"]
    return root


def render_error_payload(error: BaseException, expose_causes: bool) -> dict[str, Any]:
    """
    Render the failure payload returned to HTTP callers.

    Args:
        error: Error reaching the HTTP boundary
        expose_causes: Include the causal chain (never in production)

    Returns:
        dict: ``{"status", "message"}`` plus ``"cause"`` when exposed
    """
    http_error = convert_to_http_error(error)
    payload: dict[str, Any] = {
        "status": http_error.status,
        "message": http_error.message,
    }
    if expose_causes:
        if http_error.data:
            payload["data"] = _safe_value(http_error.data, set())
        if http_error.cause is not None:
            payload["cause"] = describe_error(http_error.cause)
    return payload
