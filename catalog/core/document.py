"""
In-memory document handles and pagination values.

A Document is what the repository hands out and what the service mutates
before a version-checked write. It remembers the stored field values and
version so a merge can be compared against what is persisted.

Dependencies: catalog.core.schema
System role: Document representation between repository and service
"""

import math
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from catalog.core.schema import MISSING, SchemaDescriptor


class Document:
    """Handle over one stored document of a given type."""

    def __init__(
        self,
        schema: SchemaDescriptor,
        *,
        id: uuid.UUID,
        fields: Mapping[str, Any],
        version: int | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        self.schema = schema
        self.id = id
        self.fields: dict[str, Any] = dict(fields)
        self.version = version
        self.created_at = created_at
        self.updated_at = updated_at
        self._stored_fields = dict(fields)
        self._stored_version = version

    def __repr__(self) -> str:
        return f"Document(type={self.schema.name!r}, id={self.id!s}, version={self.version!r})"

    @property
    def stored_version(self) -> int | None:
        """Version the document had when it was loaded."""
        return self._stored_version

    def set(self, values: Mapping[str, Any]) -> None:
        """
        Apply payload values onto the handle.

        The version key sets the expected version for the next conditional
        write. Keys outside the schema are ignored.
        """
        for key, value in values.items():
            if key == self.schema.version_key and self.schema.optimistic_concurrency:
                self.version = value
            elif key in self.schema.field_map:
                self.fields[key] = value

    def modified_paths(self) -> list[str]:
        """Names of fields (and the version key) that differ from the stored state."""
        paths = [
            name
            for name, value in self.fields.items()
            if self._stored_fields.get(name, MISSING) != value
        ]
        if self.version != self._stored_version:
            paths.append(self.schema.version_key)
        return paths

    def is_modified(self) -> bool:
        """True if anything differs from the stored state."""
        return bool(self.modified_paths())

    def to_dict(self) -> dict[str, Any]:
        """Plain representation with identity, fields, version and timestamps."""
        data: dict[str, Any] = {"id": self.id, **self.fields}
        if self.schema.optimistic_concurrency:
            data[self.schema.version_key] = self.version
        data["created_at"] = self.created_at
        data["updated_at"] = self.updated_at
        return data


@dataclass(frozen=True)
class Pagination:
    """Page position within a filtered result set."""

    total_count: int
    page: int
    per_page: int
    total_pages: int

    @classmethod
    def from_window(cls, total_count: int, skip: int, per_page: int) -> "Pagination":
        """Build pagination from a skip/limit window."""
        return cls(
            total_count=total_count,
            page=skip // per_page + 1,
            per_page=per_page,
            total_pages=math.ceil(total_count / per_page),
        )


@dataclass(frozen=True)
class PaginatedDocuments:
    """One page of documents plus its pagination data."""

    data: list[Document] = field(default_factory=list)
    pagination: Pagination = field(default_factory=lambda: Pagination(0, 1, 20, 0))
