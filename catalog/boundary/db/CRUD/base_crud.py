"""
Base repository operations for versioned document tables.

Provides generic get, insert, save and delete operations that work with
any model carrying UUID identity, timestamps and (optionally) a version
counter. Writes are conditional on the caller's expected version.
Every failure leaving this module is a RepositoryError wrapping its cause.

Dependencies: sqlalchemy, catalog.core
System role: Foundation for all document persistence operations
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from catalog.boundary.db.base import Base, utc_now
from catalog.boundary.db.errors import IdentifierCastError
from catalog.core.document import Document, PaginatedDocuments, Pagination
from catalog.core.exceptions import RepositoryError
from catalog.core.schema import IDENTITY_FIELD, SchemaDescriptor

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

DEFAULT_LIMIT = 20


@dataclass(frozen=True)
class QueryOptions:
    """Window options for multi-document reads."""

    limit: int | None = None
    skip: int = 0


class BaseCRUD(Generic[ModelT]):
    """
    Generic repository for one document table.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
        schema: Field rules of the document type
    """

    def __init__(self, model: type[ModelT], schema: SchemaDescriptor) -> None:
        """
        Initialize repository with target model and schema.

        Args:
            model: SQLAlchemy model class for database operations
            schema: Schema descriptor of the stored document type
        """
        self.model = model
        self.schema = schema

    @property
    def version_column(self):
        """Version column used for conditional writes, None without concurrency."""
        if not self.schema.check_concurrency():
            return None
        return getattr(self.model, self.schema.version_key)

    async def get(
        self,
        session: AsyncSession,
        filters: Mapping[str, Any] | None = None,
        projection: Iterable[str] | None = None,
        options: QueryOptions | None = None,
    ) -> PaginatedDocuments:
        """
        Retrieve a window of documents matching equality filters.

        Args:
            session: Async database session
            filters: Field name to value equality conditions
            projection: Field names to load (all fields if None)
            options: Limit/skip window (limit defaults to 20)

        Returns:
            PaginatedDocuments: Documents ordered by creation time, plus pagination
        """
        options = options or QueryOptions()
        per_page = options.limit or DEFAULT_LIMIT
        try:
            criteria = self._build_criteria(filters or {})
            stmt = (
                select(self.model)
                .order_by(self.model.created_at, self.model.id)
                .offset(options.skip)
                .limit(per_page)
                .execution_options(populate_existing=True)
            )
            count_stmt = select(func.count()).select_from(self.model)
            if criteria:
                stmt = stmt.where(*criteria)
                count_stmt = count_stmt.where(*criteria)
            instances = (await session.execute(stmt)).scalars().all()
            total_count = (await session.execute(count_stmt)).scalar_one()
        except Exception as exc:
            raise RepositoryError("Failed to get documents.", cause=exc) from exc

        return PaginatedDocuments(
            data=[self._to_document(instance, projection) for instance in instances],
            pagination=Pagination.from_window(total_count, options.skip, per_page),
        )

    async def get_by_id(
        self,
        session: AsyncSession,
        id: Any,
        projection: Iterable[str] | None = None,
    ) -> Document:
        """
        Retrieve a single document by identity.

        Args:
            session: Async database session
            id: Document id (UUID or its string form)
            projection: Field names to load (all fields if None)

        Returns:
            Document: Handle over the stored document

        Raises:
            RepositoryError: Wrapping IdentifierCastError for malformed ids,
                NoResultFound when no document has the id
        """
        try:
            document_id = self._coerce_id(id)
            stmt = (
                select(self.model)
                .where(self.model.id == document_id)
                .execution_options(populate_existing=True)
            )
            instance = (await session.execute(stmt)).scalar_one()
        except Exception as exc:
            raise RepositoryError("Failed to get document by id.", cause=exc, data={"id": str(id)}) from exc
        return self._to_document(instance, projection)

    async def get_one(
        self,
        session: AsyncSession,
        filters: Mapping[str, Any],
        projection: Iterable[str] | None = None,
    ) -> Document:
        """
        Retrieve the first document matching equality filters.

        Raises:
            RepositoryError: Wrapping NoResultFound when nothing matches
        """
        try:
            stmt = (
                select(self.model)
                .order_by(self.model.created_at, self.model.id)
                .limit(1)
                .execution_options(populate_existing=True)
            )
            criteria = self._build_criteria(filters)
            if criteria:
                stmt = stmt.where(*criteria)
            instance = (await session.execute(stmt)).scalars().first()
            if instance is None:
                raise NoResultFound("No document matches the given conditions.")
        except Exception as exc:
            raise RepositoryError("Failed to get document.", cause=exc, data={"filters": dict(filters)}) from exc
        return self._to_document(instance, projection)

    async def insert(self, session: AsyncSession, data: Mapping[str, Any]) -> Document:
        """
        Validate field values and create a new document at version 0.

        Args:
            session: Async database session
            data: Field values of the new document

        Returns:
            Document: Created document with generated id and timestamps

        Raises:
            RepositoryError: Wrapping pydantic.ValidationError or the store failure
        """
        try:
            values = self.schema.validate(data)
            instance = self.model(**values)
            session.add(instance)
            await session.flush()
            await session.refresh(instance)
        except Exception as exc:
            raise RepositoryError("Failed to insert document.", cause=exc) from exc

        logger.debug("Document inserted", extra={"table": self.model.__tablename__, "id": str(instance.id)})
        return self._to_document(instance)

    async def save(self, session: AsyncSession, doc: Document) -> Document:
        """
        Persist a modified document if its expected version still matches.

        The stored version becomes ``doc.version + 1``.

        Args:
            session: Async database session
            doc: Document handle carrying merged fields and expected version

        Returns:
            Document: Freshly loaded document after the write

        Raises:
            RepositoryError: Wrapping StaleDataError on version mismatch,
                NoResultFound when the document is gone
        """
        try:
            values = dict(doc.fields)
            values["updated_at"] = utc_now()
            criteria = [self.model.id == doc.id]
            if self.version_column is not None:
                criteria.append(self.version_column == doc.version)
                values[self.schema.version_key] = doc.version + 1
            stmt = (
                update(self.model)
                .where(*criteria)
                .values(**values)
                .returning(self.model.id)
                .execution_options(synchronize_session=False)
            )
            if (await session.execute(stmt)).first() is None:
                await self._raise_write_conflict(session, doc)
            saved = await self.get_by_id(session, doc.id)
        except Exception as exc:
            raise RepositoryError("Failed to save document.", cause=exc, data={"id": str(doc.id)}) from exc

        logger.debug(
            "Document saved",
            extra={"table": self.model.__tablename__, "id": str(doc.id), "version": saved.version},
        )
        return saved

    async def delete(self, session: AsyncSession, doc: Document) -> Document:
        """
        Delete a document if its expected version still matches.

        Args:
            session: Async database session
            doc: Document handle carrying the expected version

        Returns:
            Document: The handle that was deleted

        Raises:
            RepositoryError: Wrapping StaleDataError on version mismatch,
                NoResultFound when the document is gone
        """
        try:
            criteria = [self.model.id == doc.id]
            if self.version_column is not None:
                criteria.append(self.version_column == doc.version)
            stmt = (
                delete(self.model)
                .where(*criteria)
                .returning(self.model.id)
                .execution_options(synchronize_session=False)
            )
            if (await session.execute(stmt)).first() is None:
                await self._raise_write_conflict(session, doc)
        except Exception as exc:
            raise RepositoryError("Failed to delete document.", cause=exc, data={"id": str(doc.id)}) from exc

        logger.debug("Document deleted", extra={"table": self.model.__tablename__, "id": str(doc.id)})
        return doc

    async def _raise_write_conflict(self, session: AsyncSession, doc: Document) -> None:
        """
        Classify a conditional write that matched no row.

        Raises:
            RepositoryError: Wrapping NoResultFound if the document is gone
            StaleDataError: If the stored version differs from the expected one
            RepositoryError: If the document exists at the expected version
        """
        current = await self.get_by_id(session, doc.id)
        if self.version_column is not None and current.version != doc.version:
            logger.warning(
                "Version conflict",
                extra={"id": str(doc.id), "expected": doc.version, "current": current.version},
            )
            raise StaleDataError(
                f"Version {doc.version!r} of {self.model.__tablename__} {doc.id} does not match stored version {current.version}"
            )
        raise RepositoryError(
            "Conditional write matched no row although the document is unchanged.",
            data={"id": str(doc.id), "version": doc.version},
        )

    def _build_criteria(self, filters: Mapping[str, Any]) -> list:
        criteria = []
        for name, value in filters.items():
            if name == IDENTITY_FIELD:
                criteria.append(self.model.id == self._coerce_id(value))
            elif name in self.schema.field_map or (
                name == self.schema.version_key and self.schema.check_concurrency()
            ):
                criteria.append(getattr(self.model, name) == value)
            else:
                raise ValueError(f"Unknown filter field: {name}")
        return criteria

    @staticmethod
    def _coerce_id(value: Any) -> UUID:
        """Cast a caller-supplied id to UUID, raising IdentifierCastError on malformed input."""
        if isinstance(value, UUID):
            return value
        try:
            return UUID(str(value))
        except (TypeError, ValueError, AttributeError) as exc:
            raise IdentifierCastError(value) from exc

    def _to_document(self, instance: ModelT, projection: Iterable[str] | None = None) -> Document:
        names = list(self.schema.field_map)
        if projection is not None:
            requested = set(projection)
            names = [name for name in names if name in requested]
        version = getattr(instance, self.schema.version_key) if self.schema.check_concurrency() else None
        return Document(
            self.schema,
            id=instance.id,
            fields={name: getattr(instance, name) for name in names},
            version=version,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )
