"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database sessions, media payloads, mocked services
Dependencies: pytest, pytest_asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog.boundary.db.base import Base
from catalog.boundary.db.models import MediaTitleModel  # noqa: F401
from catalog.core.document import Document
from catalog.models.media import MEDIA_TITLE_SCHEMA


@pytest_asyncio.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def media_payload() -> dict[str, Any]:
    """Provide a complete create payload for a media title."""
    return {
        "show_id": "s1",
        "type": "Movie",
        "title": "Dick Johnson Is Dead",
        "director": "Kirsten Johnson",
        "cast": None,
        "country": "United States",
        "date_added": "2021-09-25",
        "release_year": 2020,
        "rating": "PG-13",
        "duration": "90 min",
        "listed_in": "Documentaries",
        "description": "As her father nears the end of his life, filmmaker Kirsten Johnson stages his death.",
    }


@pytest.fixture
def make_media_document():
    """Factory building detached media title documents."""

    def _make(version: int = 0, **fields: Any) -> Document:
        now = datetime.now(timezone.utc)
        values = {name: None for name in MEDIA_TITLE_SCHEMA.field_map}
        values.update({"show_id": "s1", "type": "Movie", "title": "Test Title"})
        values.update(fields)
        return Document(
            MEDIA_TITLE_SCHEMA,
            id=uuid.uuid4(),
            fields=values,
            version=version,
            created_at=now,
            updated_at=now,
        )

    return _make


@pytest.fixture
def mock_media_service() -> AsyncMock:
    """
    Create mock MediaService for testing.

    Returns:
        AsyncMock: Mocked MediaService with async methods
    """
    service = AsyncMock()
    service.db = AsyncMock()
    service.db.commit = AsyncMock()
    service.db.rollback = AsyncMock()
    return service
