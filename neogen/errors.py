"""
Error types for neogen.

This module defines all exception types raised by the library:
- NeogenError: Base exception
- SchemaDefinitionError: Malformed entity or attribute definitions
- DuplicateAttributeError: Two attributes with the same name on one entity
- SchemaFrozenError: Mutation attempted on a merged schema
- UnsupportedConstructError: Attribute kind the query emitter cannot render
- RecordNameCollisionError: Record naming could not separate two entities

Invariants:
    - All errors inherit from NeogenError
    - Errors name the offending entity and attribute where one exists
    - Generation never returns partial text after raising
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class NeogenError(Exception):
    """Base exception for all neogen errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "NEOGEN_ERROR"
        self.details = details or {}


class SchemaDefinitionError(NeogenError, ValueError):
    """Entity or attribute definition is malformed.

    Raised when:
    - An entity or attribute name is empty
    - A relationship type tag is empty
    - A merged schema references an entity missing from its registry
    """

    def __init__(self, message: str, entity_name: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="SCHEMA_DEFINITION",
            details={"entity_name": entity_name},
        )
        self.entity_name = entity_name


class DuplicateAttributeError(SchemaDefinitionError):
    """An entity already has an attribute with this name."""

    def __init__(self, entity_name: str, attribute_name: str) -> None:
        super().__init__(
            f"Duplicate attribute '{attribute_name}' in entity '{entity_name}'",
            entity_name=entity_name,
        )
        self.attribute_name = attribute_name
        self.details["attribute_name"] = attribute_name


class SchemaFrozenError(NeogenError):
    """Raised when attempting to modify a merged schema."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="SCHEMA_FROZEN")


class UnsupportedConstructError(NeogenError):
    """Attribute cannot be rendered as a query fragment.

    Raised when:
    - An endpoint-of-relationship attribute (start/end) is emitted
    """

    def __init__(self, entity_name: str, attribute_name: str, construct: str) -> None:
        super().__init__(
            f"Cannot emit query fragment for {construct} attribute "
            f"'{attribute_name}' of entity '{entity_name}'",
            code="UNSUPPORTED_CONSTRUCT",
            details={
                "entity_name": entity_name,
                "attribute_name": attribute_name,
                "construct": construct,
            },
        )
        self.entity_name = entity_name
        self.attribute_name = attribute_name
        self.construct = construct


class RecordNameCollisionError(NeogenError):
    """Two distinct entities were assigned the same record name.

    Attributes:
        record_name: The colliding record name
        paths: Entity-name paths from the root to each colliding entity
    """

    def __init__(self, record_name: str, paths: Sequence[Sequence[str]]) -> None:
        rendered: List[str] = [" -> ".join(path) for path in paths]
        super().__init__(
            f"Record name '{record_name}' is claimed by distinct entities at "
            + "; ".join(rendered),
            code="RECORD_NAME_COLLISION",
            details={"record_name": record_name, "paths": rendered},
        )
        self.record_name = record_name
        self.paths = [list(path) for path in paths]
