"""
Media catalog service orchestrator.

Adds the per-country catalog breakdowns to the generic document service.

Dependencies: sqlalchemy, catalog.boundary.db.CRUD, catalog.models.media
System role: Media catalog use case orchestration
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.application.services.document_service import DocumentService
from catalog.boundary.db.CRUD.media_crud import MediaTitleCRUD, media_title_crud
from catalog.models.media import CountryMediaBreakdown, RatingCount

logger = logging.getLogger(__name__)


class MediaService(DocumentService):
    """Media title service orchestrator."""

    repository: MediaTitleCRUD

    def __init__(self, db: AsyncSession, repository: MediaTitleCRUD = media_title_crud) -> None:
        """
        Initialize media service with async database session.

        Args:
            db: Async SQLAlchemy session
            repository: Media title repository (shared singleton by default)
        """
        super().__init__(db, repository)

    async def get_country_media_breakdown(self, country: str) -> list[CountryMediaBreakdown]:
        """
        Count titles per media type for one country.

        Args:
            country: Country name, matched exactly against each listed country

        Returns:
            list[CountryMediaBreakdown]: At most one entry, empty if nothing matches
        """
        try:
            rows = await self.repository.get_country_media_breakdown(self.db, country)
        except Exception as exc:
            raise self._handle_error(exc, "Failed to get media types by country.")
        return [CountryMediaBreakdown.model_validate(row) for row in rows]

    async def get_country_rating_breakdown(self, country: str) -> list[RatingCount]:
        """
        Count titles per media type and rating for one country.

        Returns:
            list[RatingCount]: Sorted by type, then rating (unrated first)
        """
        try:
            rows = await self.repository.get_country_rating_breakdown(self.db, country)
        except Exception as exc:
            raise self._handle_error(exc, "Failed to get ratings by country.")
        return [RatingCount.model_validate(row) for row in rows]

    async def get_countries(self) -> list[str]:
        """List every country named in the catalog, sorted."""
        try:
            return await self.repository.get_countries(self.db)
        except Exception as exc:
            raise self._handle_error(exc, "Failed to get countries.")
