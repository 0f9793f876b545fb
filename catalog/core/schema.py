"""
Schema descriptors for document types.

Each document type declares its user-settable fields once as a table of
FieldDescriptor entries. The SchemaDescriptor answers whether a payload
carries exactly the properties a document action needs, and validates
field values through a pydantic model built from the same table.

Dependencies: pydantic
System role: Payload shape rules shared by every document service
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter, create_model


class _Missing:
    """Marker for a field declared without a default value."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

IDENTITY_FIELD = "id"
TIMESTAMP_FIELDS = ("created_at", "updated_at")


class DocumentAction(str, Enum):
    """Actions a caller can perform on a document."""

    CREATE = "create"
    REPLACE = "replace"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Metadata about one user-settable field.

    Attributes:
        name: Field name as it appears in payloads
        annotation: Python type the value is validated against
        is_required: Whether the value must be present and non-null
        default: Value used on create when the field is omitted
        constraints: Extra pydantic Field() keyword constraints (max_length, ge, ...)
    """

    name: str
    annotation: Any = str
    is_required: bool = False
    default: Any = MISSING
    constraints: Mapping[str, Any] = field(default_factory=dict)

    @property
    def has_default(self) -> bool:
        """True when the field declares a default value."""
        return self.default is not MISSING

    def to_pydantic(self) -> tuple[Any, Any]:
        """Return the (annotation, FieldInfo) pair used to build the validation model."""
        if self.has_default:
            return self.annotation, Field(default=self.default, **self.constraints)
        if self.is_required:
            return self.annotation, Field(..., **self.constraints)
        return Optional[self.annotation], Field(default=None, **self.constraints)


class SchemaDescriptor:
    """
    Field rules for one document type.

    The field map excludes the identity, version key and timestamp fields,
    and is derived once per descriptor.
    """

    def __init__(
        self,
        name: str,
        fields: Sequence[FieldDescriptor],
        *,
        optimistic_concurrency: bool = True,
        version_key: str = "version",
    ) -> None:
        """
        Initialize schema descriptor.

        Args:
            name: Document type name (used for the validation model name)
            fields: Declared field table
            optimistic_concurrency: Whether writes are version-checked
            version_key: Payload key carrying the document version
        """
        self.name = name
        self.optimistic_concurrency = optimistic_concurrency
        self.version_key = version_key
        self._declared_fields = tuple(fields)

    @cached_property
    def field_map(self) -> Mapping[str, FieldDescriptor]:
        """User-settable fields keyed by name."""
        excluded = {IDENTITY_FIELD, self.version_key, *TIMESTAMP_FIELDS}
        return {
            descriptor.name: descriptor
            for descriptor in self._declared_fields
            if descriptor.name not in excluded
        }

    @cached_property
    def validation_model(self) -> type[BaseModel]:
        """Pydantic model enforcing value types and constraints of the field map."""
        model_name = "".join(part.capitalize() for part in self.name.split("_")) + "Fields"
        definitions = {name: descriptor.to_pydantic() for name, descriptor in self.field_map.items()}
        return create_model(
            model_name,
            __config__=ConfigDict(extra="forbid"),
            **definitions,
        )

    @cached_property
    def _version_adapter(self) -> TypeAdapter:
        return TypeAdapter(NonNegativeInt)

    def check_concurrency(self) -> bool:
        """Return True if optimistic concurrency is enabled."""
        return self.optimistic_concurrency

    def has_version_key(self, payload: Mapping[str, Any]) -> bool:
        """Return True if the payload carries the version key."""
        return self.version_key in payload

    def has_excess_properties(self, payload: Mapping[str, Any], include_version: bool = True) -> bool:
        """
        Check for payload keys outside the field map.

        Args:
            payload: Caller-supplied data
            include_version: Allow the version key when concurrency is enabled

        Returns:
            bool: True if any key is not allowed
        """
        allowed = set(self.field_map)
        if self.optimistic_concurrency and include_version:
            allowed.add(self.version_key)
        return any(key not in allowed for key in payload)

    def intersection_with_schema(self, payload: Mapping[str, Any]) -> set[str]:
        """Return the payload keys that are known fields."""
        return {key for key in payload if key in self.field_map}

    def has_properties_to_create(self, payload: Mapping[str, Any]) -> bool:
        """Every required field without a default must be present."""
        return all(
            name in payload
            for name, descriptor in self.field_map.items()
            if descriptor.is_required and not descriptor.has_default
        )

    def has_properties_to_replace(self, payload: Mapping[str, Any]) -> bool:
        """Every field must be present, plus the version key when concurrency is enabled."""
        if len(self.intersection_with_schema(payload)) != len(self.field_map):
            return False
        if self.optimistic_concurrency:
            return self.has_version_key(payload)
        return True

    def has_properties_to_update(self, payload: Mapping[str, Any]) -> bool:
        """At least one field must be present, plus the version key when concurrency is enabled."""
        result = len(self.intersection_with_schema(payload)) > 0
        if self.optimistic_concurrency:
            result = result and self.has_version_key(payload)
        return result

    def has_properties_to_delete(self, payload: Mapping[str, Any]) -> bool:
        """The version key is required only when concurrency is enabled."""
        if self.optimistic_concurrency:
            return self.has_version_key(payload)
        return True

    def has_properties_for(self, action: DocumentAction, payload: Mapping[str, Any]) -> bool:
        """
        Check that the payload has the properties the action requires.

        Args:
            action: Document action being performed
            payload: Caller-supplied data

        Returns:
            bool: True if nothing required is missing

        Raises:
            ValueError: If action is not a DocumentAction
        """
        if action is DocumentAction.CREATE:
            return self.has_properties_to_create(payload)
        if action is DocumentAction.REPLACE:
            return self.has_properties_to_replace(payload)
        if action is DocumentAction.UPDATE:
            return self.has_properties_to_update(payload)
        if action is DocumentAction.DELETE:
            return self.has_properties_to_delete(payload)
        raise ValueError(f"Invalid action: {action!r}")

    def validate(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate field values and return them coerced to their declared types.

        Omitted optional fields come back as None, omitted defaulted fields
        as their default.

        Raises:
            pydantic.ValidationError: If a value fails its type or constraints
        """
        return self.validation_model.model_validate(dict(values)).model_dump()

    def validate_version(self, value: Any) -> int:
        """
        Validate a caller-supplied version value.

        Raises:
            pydantic.ValidationError: If the value is not a non-negative integer
        """
        return self._version_adapter.validate_python(value)
