"""
Generic document service.

Validates payloads against the document action being performed, runs
the repository operation, commits the session and maps every failure
into the application error taxonomy.

Dependencies: sqlalchemy, pydantic, catalog.boundary.db.CRUD, catalog.core
System role: Document use case orchestration
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from catalog.boundary.db.CRUD.base_crud import DEFAULT_LIMIT, BaseCRUD, QueryOptions
from catalog.boundary.db.errors import IdentifierCastError
from catalog.core.document import Document, PaginatedDocuments
from catalog.core.exceptions import (
    ApplicationError,
    ConcurrencyError,
    ExcessDataError,
    InsufficientDataError,
    NotFoundError,
    NotModifiedError,
    ValidationError,
    has_error_of_type,
)
from catalog.core.schema import DocumentAction, SchemaDescriptor

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100


class DocumentService:
    """Document service orchestrator for one document type."""

    def __init__(self, db: AsyncSession, repository: BaseCRUD) -> None:
        """
        Initialize document service.

        Args:
            db: Async SQLAlchemy session
            repository: Repository of the document type
        """
        self.db = db
        self.repository = repository

    @property
    def schema(self) -> SchemaDescriptor:
        """Schema descriptor of the managed document type."""
        return self.repository.schema

    async def get(
        self,
        page: int = 1,
        per_page: int = DEFAULT_LIMIT,
        filters: Mapping[str, Any] | None = None,
    ) -> PaginatedDocuments:
        """
        Get one page of documents.

        Args:
            page: 1-based page number (values below 1 read page 1)
            per_page: Page size, clamped to [1, 100]
            filters: Optional equality filters

        Returns:
            PaginatedDocuments: Documents plus pagination
        """
        page = max(page, 1)
        per_page = min(max(per_page, 1), MAX_PER_PAGE)
        options = QueryOptions(limit=per_page, skip=(page - 1) * per_page)
        try:
            return await self.repository.get(self.db, filters, None, options)
        except Exception as exc:
            raise self._handle_error(exc, "Failed to get documents.")

    async def get_by_id(self, id: Any) -> Document:
        """
        Get a document by id.

        A malformed id cannot identify any document, so it reads as NotFound.

        Raises:
            NotFoundError: If the id is malformed or unknown
        """
        try:
            return await self.repository.get_by_id(self.db, id)
        except Exception as exc:
            if has_error_of_type(exc, IdentifierCastError):
                raise NotFoundError(cause=exc, data={"id": str(id)})
            raise self._handle_error(exc, "Failed to get document.")

    async def insert(self, payload: Mapping[str, Any]) -> Document:
        """
        Create a new document.

        Args:
            payload: Field values; the version key is not accepted

        Returns:
            Document: Created document at version 0

        Raises:
            InsufficientDataError: If a required field is missing
            ExcessDataError: If the payload carries unknown keys or the version key
            ValidationError: If a field value is invalid
        """
        self._ensure_expected_properties(payload, DocumentAction.CREATE)
        try:
            doc = await self.repository.insert(self.db, payload)
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            raise self._handle_error(exc, "Failed to insert document.")

        logger.info("Document created", extra={"document_type": self.schema.name, "id": str(doc.id)})
        return doc

    async def update_or_replace(
        self,
        doc: Document,
        payload: Mapping[str, Any],
        replace: bool = False,
    ) -> Document:
        """
        Update, or replace, a document.

        Args:
            doc: Loaded document handle
            payload: New field values plus the expected version
            replace: Require every field (replace) instead of at least one (update)

        Returns:
            Document: Stored document after the write, at version + 1

        Raises:
            InsufficientDataError: If required properties are missing
            ExcessDataError: If unknown keys are present
            ValidationError: If a merged value is invalid
            NotModifiedError: If the payload changes nothing
            ConcurrencyError: If the expected version is stale
            NotFoundError: If the document was deleted meanwhile
        """
        action = DocumentAction.REPLACE if replace else DocumentAction.UPDATE
        self._ensure_expected_properties(payload, action)

        doc.set(payload)

        try:
            doc.fields = self.schema.validate(doc.fields)
            if self.schema.check_concurrency():
                doc.version = self.schema.validate_version(doc.version)

            if not doc.is_modified():
                raise NotModifiedError(data={"id": str(doc.id)})

            saved = await self.repository.save(self.db, doc)
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            raise self._handle_error(exc, "Failed to update document.")

        logger.info(
            "Document replaced" if replace else "Document updated",
            extra={"document_type": self.schema.name, "id": str(saved.id), "version": saved.version},
        )
        return saved

    async def delete(self, doc: Document, payload: Mapping[str, Any] | None = None) -> Document:
        """
        Delete a document.

        Args:
            doc: Loaded document handle
            payload: ``{version_key: expected}`` when concurrency is enabled, else empty

        Returns:
            Document: The deleted document

        Raises:
            InsufficientDataError: If the version is missing
            ExcessDataError: If anything besides the version is present
            ConcurrencyError: If the expected version is stale
            NotFoundError: If the document was deleted meanwhile
        """
        payload = payload or {}
        self._ensure_expected_properties(payload, DocumentAction.DELETE)

        if payload:
            doc.set(payload)

        try:
            if self.schema.check_concurrency():
                doc.version = self.schema.validate_version(doc.version)
            deleted = await self.repository.delete(self.db, doc)
            await self.db.commit()
        except Exception as exc:
            await self.db.rollback()
            raise self._handle_error(exc, "Failed to delete document.")

        logger.info("Document deleted", extra={"document_type": self.schema.name, "id": str(deleted.id)})
        return deleted

    def _ensure_expected_properties(self, payload: Mapping[str, Any], action: DocumentAction) -> None:
        """
        Ensure the payload carries exactly the properties the action requires.

        Raises:
            InsufficientDataError: If a required property is missing
            ExcessDataError: If a property outside the allowed set is present
        """
        if not self.schema.has_properties_for(action, payload):
            raise InsufficientDataError(data=dict(payload))

        if action is DocumentAction.DELETE:
            required_count = 1 if self.schema.check_concurrency() else 0
            if len(payload) > required_count:
                raise ExcessDataError(data=dict(payload))
        elif self.schema.has_excess_properties(payload, include_version=action is not DocumentAction.CREATE):
            raise ExcessDataError(data=dict(payload))

    def _handle_error(self, error: Exception, message: str) -> ApplicationError:
        """
        Map a failure into the application error taxonomy.

        Args:
            error: Failure raised by the repository or the service itself
            message: Message for errors that are not otherwise classified

        Returns:
            ApplicationError: The error to raise
        """
        if has_error_of_type(error, (PydanticValidationError, IdentifierCastError)):
            mapped: ApplicationError = ValidationError(cause=error)
        elif has_error_of_type(error, StaleDataError):
            mapped = ConcurrencyError(cause=error)
        elif has_error_of_type(error, NoResultFound):
            mapped = NotFoundError(cause=error)
        elif isinstance(error, ApplicationError):
            return error
        else:
            mapped = ApplicationError(message, cause=error)

        logger.warning(
            message,
            extra={"document_type": self.schema.name, "error_kind": mapped.kind.value, "error": str(error)},
        )
        return mapped
