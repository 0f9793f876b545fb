"""
Database boundary package.

Exports:
  - Base, UUIDMixin, TimestampMixin, VersionMixin: ORM foundation
  - get_async_engine, get_async_session_factory, get_async_db: Connection lifecycle
  - IdentifierCastError: Malformed identifier failure

Dependencies: sqlalchemy, catalog.configs
System role: Persistence layer entry point
"""

from catalog.boundary.db.base import Base, TimestampMixin, UUIDMixin, VersionMixin
from catalog.boundary.db.connection import get_async_db, get_async_engine, get_async_session_factory
from catalog.boundary.db.errors import IdentifierCastError

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "VersionMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "IdentifierCastError",
]
