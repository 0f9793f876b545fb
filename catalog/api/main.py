"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers, registers the exception
handlers that render failure payloads and configures uvicorn server.

Dependencies: fastapi, catalog.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import __version__
from catalog.boundary.db.connection import get_async_engine
from catalog.configs import get_settings
from catalog.core.error_translation import convert_to_http_error, render_error_payload
from catalog.core.exceptions import ApplicationError, HttpError
from catalog.observability import configure_logging

from .routers import health_router, media_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Media catalog API starting", extra={"environment": settings.environment})

    yield

    # Shutdown
    await get_async_engine().dispose()
    logger.info("Database engine disposed")


def error_response(error: BaseException) -> Response:
    """
    Render an error as the HTTP failure payload.

    Outside production the payload includes the causal chain.
    """
    http_error = convert_to_http_error(error)
    if http_error.status == status.HTTP_304_NOT_MODIFIED:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)
    payload = render_error_payload(http_error, expose_causes=not get_settings().is_production)
    return JSONResponse(status_code=http_error.status, content=payload)


async def application_error_handler(request: Request, exc: ApplicationError) -> Response:
    """Render application errors raised by routes and dependencies."""
    if convert_to_http_error(exc).status >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "error_kind": exc.kind.value, "error": str(exc)},
        )
    return error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Render framework HTTP errors (unknown routes, wrong methods) in the same shape."""
    message = exc.detail if isinstance(exc.detail, str) else None
    return error_response(HttpError(exc.status_code, message, cause=exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
    """Render malformed query, path or body values as 400."""
    return error_response(
        HttpError(
            status.HTTP_400_BAD_REQUEST,
            "The request is malformed.",
            cause=exc,
            data={"errors": exc.errors()},
        )
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Render anything unexpected as 500."""
    logger.exception("Unhandled error", extra={"path": request.url.path, "error": str(exc)})
    return error_response(exc)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()

    app = FastAPI(
        title="Media Catalog API",
        description="Versioned CRUD and country breakdowns over a media catalog",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Link", "Location", "X-Total-Count", "X-Page", "X-Per-Page", "X-Total-Pages"],
    )

    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register all routers with the versioned prefix
    app.include_router(health_router, prefix=settings.api_prefix)
    app.include_router(media_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "catalog.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
