"""
Store-level failure types raised by the boundary layer.

Not-found and version-conflict failures reuse SQLAlchemy's own
NoResultFound and StaleDataError; this module adds the identifier cast
failure, which SQLAlchemy has no type for.

Dependencies: None
System role: Store failure types recognised by the service layer
"""

from typing import Any


class IdentifierCastError(ValueError):
    """Raised when a value cannot be cast to the store's identity type."""

    def __init__(self, value: Any, target: str = "UUID") -> None:
        self.value = value
        self.target = target
        super().__init__(f"Cast to {target} failed for value {value!r}")
