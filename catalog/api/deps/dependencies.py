"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: catalog.application, catalog.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.application.services import MediaService
from catalog.boundary.db import get_async_db
from catalog.core.document import Document


def get_media_service(db: AsyncSession = Depends(get_async_db)) -> MediaService:
    """
    Get media service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        MediaService: Media service instance
    """
    return MediaService(db=db)


async def load_media_document(
    media_id: str,
    media_service: MediaService = Depends(get_media_service),
) -> Document:
    """
    Load the media title addressed by the ``{media_id}`` path parameter.

    Args:
        media_id: Document id from the path (malformed ids read as not found)
        media_service: Injected MediaService

    Returns:
        Document: Loaded document handle

    Raises:
        NotFoundError: If no media title has the id
    """
    return await media_service.get_by_id(media_id)
