"""
Media error handling utilities.

Provides a decorator for consistent error handling across media catalog
API endpoints. Application errors are converted into HttpError carrying
the mapped status; NotModified becomes an empty 304 response.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import Response, status

from catalog.core.error_translation import convert_to_http_error
from catalog.core.exceptions import ApplicationError, HttpError, NotModifiedError

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_media_errors(func: F) -> F:
    """
    Decorator to handle media errors and transform them into HttpErrors.

    This centralizes:
    - Logging of errors with their kind and status
    - Mapping error kinds to HTTP status codes
    - The empty 304 response for unchanged documents
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except NotModifiedError as e:
            logger.info("Media title not modified", extra={"data": dict(e.data)})
            return Response(status_code=status.HTTP_304_NOT_MODIFIED)

        except HttpError:
            raise

        except ApplicationError as e:
            http_error = convert_to_http_error(e)
            log = logger.error if http_error.status >= 500 else logger.warning
            log(
                "Media request failed",
                extra={"error_kind": e.kind.value, "status": http_error.status, "error": str(e)},
            )
            raise http_error

        except Exception as e:
            logger.exception("Unexpected failure in media operation", extra={"error": str(e)})
            raise convert_to_http_error(e)

    return wrapper  # type: ignore
