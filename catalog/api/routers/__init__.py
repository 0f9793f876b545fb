"""API routers."""

from .health import router as health_router
from .media import router as media_router

__all__ = [
    "health_router",
    "media_router",
]
