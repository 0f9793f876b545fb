"""
Test suite for dependency injection container.

Tests factory functions for service creation and the document loader.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.api.deps import get_media_service, load_media_document
from catalog.application.services import MediaService
from catalog.boundary.db.CRUD import media_title_crud
from catalog.core.exceptions import NotFoundError


class TestGetMediaService:
    """Test suite for get_media_service()."""

    def test_should_bind_session_and_shared_repository(self) -> None:
        """Test service gets the request session and the singleton repository."""
        # Arrange
        session = AsyncMock(spec=AsyncSession)

        # Act
        service = get_media_service(db=session)

        # Assert
        assert isinstance(service, MediaService)
        assert service.db is session
        assert service.repository is media_title_crud


class TestLoadMediaDocument:
    """Test suite for load_media_document()."""

    @pytest.mark.asyncio
    async def test_should_load_by_path_id(self, mock_media_service, make_media_document) -> None:
        """Test the loader delegates to get_by_id."""
        doc = make_media_document()
        mock_media_service.get_by_id.return_value = doc

        loaded = await load_media_document(str(doc.id), media_service=mock_media_service)

        assert loaded is doc
        mock_media_service.get_by_id.assert_awaited_once_with(str(doc.id))

    @pytest.mark.asyncio
    async def test_should_propagate_not_found(self, mock_media_service) -> None:
        """Test a missing document is not swallowed."""
        mock_media_service.get_by_id.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await load_media_document("missing", media_service=mock_media_service)
