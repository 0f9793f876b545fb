"""Service orchestrators."""

from .document_service import DocumentService
from .media_service import MediaService

__all__ = [
    "DocumentService",
    "MediaService",
]
