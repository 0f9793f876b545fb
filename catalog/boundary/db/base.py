"""
SQLAlchemy declarative base and common mixins.

Provides base class for all document tables and reusable mixins
for identity, store-managed timestamps and the optimistic concurrency
version counter.

Dependencies: sqlalchemy
System role: Foundation for all document tables
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for ORM model registration.

    All document tables inherit from this class to ensure they're
    registered with the metadata and included in table creation.
    """

    pass


class UUIDMixin:
    """
    Mixin providing a store-assigned UUID identity.

    Attributes:
        id: UUID v4 primary key, auto-generated on insert
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """
    Mixin providing automatic timestamp tracking.

    created_at is set once on row creation and never changes.
    updated_at is refreshed on every update. Neither is user-settable.

    Attributes:
        created_at: Row creation timestamp (UTC, immutable)
        updated_at: Last modification timestamp (UTC)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )


class VersionMixin:
    """
    Mixin providing the optimistic concurrency version counter.

    Starts at 0 and is incremented by exactly one on every successful
    conditional write.

    Attributes:
        version: Monotonically increasing document version
    """

    version: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
