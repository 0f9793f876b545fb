"""
Database table creation script.

Creates all document tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, catalog.configs
System role: Database schema initialization for local runs

Usage:
    python -m catalog.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from catalog.boundary.db.base import Base
from catalog.boundary.db.connection import get_async_engine
from catalog.observability import configure_logging

# Import all models to register them with Base.metadata
from catalog.boundary.db.models.media_model import MediaTitleModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all document tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Engine to use (configured engine if None)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all document tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Tables dropped", extra={"tables": sorted(Base.metadata.tables)})


if __name__ == "__main__":
    configure_logging()
    asyncio.run(create_all_tables())
