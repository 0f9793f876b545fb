"""FastAPI dependency factories."""

from catalog.api.deps.dependencies import get_media_service, load_media_document

__all__ = ["get_media_service", "load_media_document"]
