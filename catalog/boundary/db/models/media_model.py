"""
Media title ORM model.

One row per catalog title (movie or TV show). The country column holds
a ", "-separated list of production countries.

Dependencies: sqlalchemy, catalog.boundary.db.base
System role: Media catalog persistence
"""

from datetime import date

from sqlalchemy import Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog.boundary.db.base import Base, TimestampMixin, UUIDMixin, VersionMixin


class MediaTitleModel(Base, UUIDMixin, TimestampMixin, VersionMixin):
    """
    Media title ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        show_id: Catalog-assigned show identifier
        type: Media type ("Movie", "TV Show")
        title: Title, unique across the catalog
        director, cast: Comma-separated people lists
        country: ", "-separated production countries
        date_added: Date the title was added to the catalog
        release_year: Original release year
        rating: Audience rating ("PG-13", "TV-MA", ...)
        duration: Runtime or season count as text
        listed_in: Comma-separated genres
        description: Synopsis
        version: Optimistic concurrency counter
        created_at, updated_at: Store-managed timestamps (UTC)
    """

    __tablename__ = "media_titles"

    show_id: Mapped[str] = mapped_column(String(32), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    director: Mapped[str | None] = mapped_column(Text, nullable=True)
    cast: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    date_added: Mapped[date | None] = mapped_column(Date, nullable=True)
    release_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[str | None] = mapped_column(String(32), nullable=True)
    duration: Mapped[str | None] = mapped_column(String(32), nullable=True)
    listed_in: Mapped[str | None] = mapped_column(String(512), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
