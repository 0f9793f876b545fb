"""
Media catalog domain models and schemas.

Declares the field table of the media title document type and the
response rows of the catalog aggregation queries.

Dependencies: pydantic, catalog.core.schema
System role: Media catalog contracts
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from catalog.core.schema import FieldDescriptor, SchemaDescriptor

MEDIA_TITLE_SCHEMA = SchemaDescriptor(
    "media_title",
    [
        FieldDescriptor("show_id", str, is_required=True, constraints={"min_length": 1, "max_length": 32}),
        FieldDescriptor("type", str, is_required=True, constraints={"min_length": 1, "max_length": 32}),
        FieldDescriptor("title", str, is_required=True, constraints={"min_length": 1, "max_length": 512}),
        FieldDescriptor("director", str),
        FieldDescriptor("cast", str),
        FieldDescriptor("country", str, constraints={"max_length": 1024}),
        FieldDescriptor("date_added", date),
        FieldDescriptor("release_year", int, constraints={"ge": 1800, "le": 9999}),
        FieldDescriptor("rating", str, constraints={"max_length": 32}),
        FieldDescriptor("duration", str, constraints={"max_length": 32}),
        FieldDescriptor("listed_in", str, constraints={"max_length": 512}),
        FieldDescriptor("description", str),
    ],
)


class MediaTypeCount(BaseModel):
    """Number of titles of one media type."""

    type: str = Field(description="Media type, e.g. 'Movie' or 'TV Show'")
    count: int = Field(ge=0)


class CountryMediaBreakdown(BaseModel):
    """Title counts per media type for one country."""

    country: str
    media_types: list[MediaTypeCount]


class RatingCount(BaseModel):
    """Number of titles of one media type with one rating."""

    type: str
    rating: str | None = Field(default=None, description="Audience rating, None when unrated")
    count: int = Field(ge=0)


class MediaTitleResponse(BaseModel):
    """Response schema for a stored media title."""

    id: UUID
    show_id: str
    type: str
    title: str
    director: str | None = None
    cast: str | None = None
    country: str | None = None
    date_added: date | None = None
    release_year: int | None = None
    rating: str | None = None
    duration: str | None = None
    listed_in: str | None = None
    description: str | None = None
    version: int = Field(description="Current version; send it back with PUT, PATCH and DELETE")
    created_at: datetime
    updated_at: datetime
