"""
Core type definitions for the neogen schema model.

This module defines the foundational types for a property graph schema:
- Property: A scalar feature of an entity
- NodeViaRelationship: A node reached through a typed relationship
- RelationshipHolder: A relationship entity attached to a node
- EndpointOfRelationship: The start or end node of a relationship entity
- Entity: A named collection of attributes (node type or relationship type)

Invariants:
    - Attribute names are unique within one Entity
    - Entity names are identity keys: equal names denote the same concept
    - Attribute declaration order is preserved (properties and holders interleave)
    - Holders reference their target Entity directly; merge rewires the link

How to change safely:
    - Add new attribute kinds to AttributeKind and handle them in every renderer
    - Never make holders hashable by value; the graph may contain cycles

Example:
    >>> from neogen.schema.types import Entity, prop, outgoing, Multiplicity
    >>> Person = Entity("Person", prop("name", "str"))
    >>> Person.add(outgoing("friends", "KNOWS", Multiplicity.MANY, Person))
    Entity('Person')
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, ClassVar, Iterable, Iterator, Union

from ..errors import DuplicateAttributeError, SchemaDefinitionError, SchemaFrozenError


class Direction(Enum):
    """Direction of a relationship as seen from the holding node.

    Each member carries the two arrow halves surrounding the relationship
    pattern, e.g. ``-[`` and ``]->`` for an outgoing relationship.
    """

    INCOMING = ("<-[", "]-")
    OUTGOING = ("-[", "]->")

    def __init__(self, arrow_start: str, arrow_end: str) -> None:
        self.arrow_start = arrow_start
        self.arrow_end = arrow_end


class Role(Enum):
    """Role of a node within a relationship."""

    START = "start"
    END = "end"


class Multiplicity(Enum):
    """Cardinality of a reference."""

    ONE = "one"
    ONE_OR_ZERO = "one_or_zero"
    MANY = "many"


class PrimitiveType(Enum):
    """Supported scalar value types for properties."""

    STRING = "str"
    INTEGER = "int"
    FLOAT = "float"
    BOOLEAN = "bool"
    TIMESTAMP = "timestamp"
    DATE = "date"
    JSON = "json"
    BYTES = "bytes"

    @classmethod
    def from_str(cls, value: str) -> PrimitiveType:
        """Convert string representation to PrimitiveType.

        Raises:
            ValueError: If value is not a valid primitive type
        """
        for kind in cls:
            if kind.value == value:
                return kind
        valid = [k.value for k in cls]
        raise ValueError(f"Invalid primitive type '{value}'. Valid types: {valid}")


class AttributeKind(Enum):
    """Closed set of attribute variants. Renderers dispatch on this tag."""

    PROPERTY = "property"
    NODE = "node"
    RELATIONSHIP = "relationship"
    ENDPOINT = "endpoint"


def _require_name(name: str, what: str) -> None:
    if not name:
        raise SchemaDefinitionError(f"{what} name cannot be empty")


@dataclass(frozen=True)
class Property:
    """Scalar attribute of an entity.

    Attributes:
        name: Attribute name, unique within the entity
        value_type: Primitive value type
        nullable: Whether the value may be absent
    """

    kind: ClassVar[AttributeKind] = AttributeKind.PROPERTY

    name: str
    value_type: PrimitiveType
    nullable: bool = False

    def __post_init__(self) -> None:
        _require_name(self.name, "Property")

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "type": self.value_type.value,
        }
        if self.nullable:
            result["nullable"] = True
        return result


@dataclass(eq=False)
class NodeViaRelationship:
    """Node reached from the holding node through a typed relationship.

    Attributes:
        name: Attribute name
        relationship_type: Relationship type tag (e.g. ``KNOWS``)
        multiplicity: How many nodes the attribute holds
        direction: Relationship direction seen from the holder
        target: Referenced node entity
    """

    kind: ClassVar[AttributeKind] = AttributeKind.NODE

    name: str
    relationship_type: str
    multiplicity: Multiplicity
    direction: Direction
    target: Entity = dataclass_field(repr=False)

    def __post_init__(self) -> None:
        _require_name(self.name, "Attribute")
        if isinstance(self.relationship_type, Enum):
            self.relationship_type = self.relationship_type.name
        _require_name(self.relationship_type, "Relationship type")

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "relationship_type": self.relationship_type,
            "multiplicity": self.multiplicity.value,
            "direction": self.direction.name.lower(),
            "target": self.target.name,
        }


@dataclass(eq=False)
class RelationshipHolder:
    """Relationship entity attached to the holding node.

    The relationship entity's name doubles as the relationship type.
    """

    kind: ClassVar[AttributeKind] = AttributeKind.RELATIONSHIP

    name: str
    multiplicity: Multiplicity
    direction: Direction
    target: Entity = dataclass_field(repr=False)

    def __post_init__(self) -> None:
        _require_name(self.name, "Attribute")

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "multiplicity": self.multiplicity.value,
            "direction": self.direction.name.lower(),
            "target": self.target.name,
        }


@dataclass(eq=False)
class EndpointOfRelationship:
    """Start or end node of the holding relationship entity."""

    kind: ClassVar[AttributeKind] = AttributeKind.ENDPOINT

    name: str
    role: Role
    target: Entity = dataclass_field(repr=False)

    def __post_init__(self) -> None:
        _require_name(self.name, "Attribute")

    @property
    def multiplicity(self) -> Multiplicity:
        return Multiplicity.ONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "role": self.role.value,
            "target": self.target.name,
        }


EntityHolder = Union[NodeViaRelationship, RelationshipHolder, EndpointOfRelationship]
Attribute = Union[Property, EntityHolder]


class Entity:
    """A named schema concept: a node type or a relationship type.

    Entities form a possibly cyclic reference graph through their holders.
    Identity during merge is the name; two Entity objects with the same
    name must describe the same concept.

    Attributes:
        name: Entity name (identity key)
        frozen: Whether the entity belongs to a merged schema
    """

    def __init__(self, name: str, *attributes: Attribute) -> None:
        _require_name(name, "Entity")
        self.name = name
        self._attributes: dict[str, Attribute] = {}
        self._frozen = False
        self.add(*attributes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, *attributes: Attribute) -> Entity:
        """Append attributes in declaration order.

        Returns:
            The entity itself, so declarations can be chained

        Raises:
            DuplicateAttributeError: If an attribute name is already taken
            SchemaFrozenError: If the entity belongs to a merged schema
        """
        if self._frozen:
            raise SchemaFrozenError(
                f"Cannot add attributes to entity '{self.name}': schema is merged"
            )
        batch: set[str] = set()
        for attribute in attributes:
            if attribute.name in batch or self.get_attribute(attribute.name) is not None:
                raise DuplicateAttributeError(self.name, attribute.name)
            batch.add(attribute.name)
        for attribute in attributes:
            self._attributes[attribute.name] = attribute
        return self

    @property
    def attributes(self) -> tuple[Attribute, ...]:
        """All attributes in declaration order."""
        return tuple(self._attributes.values())

    @property
    def properties(self) -> tuple[Property, ...]:
        return tuple(a for a in self._attributes.values() if a.kind is AttributeKind.PROPERTY)

    @property
    def entity_holders(self) -> tuple[EntityHolder, ...]:
        return tuple(
            a for a in self._attributes.values() if a.kind is not AttributeKind.PROPERTY
        )

    def get_attribute(self, name: str) -> Attribute | None:
        return self._attributes.get(name)

    def freeze(self) -> None:
        self._frozen = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation. References appear by name."""
        return {
            "name": self.name,
            "attributes": [a.to_dict() for a in self._attributes.values()],
        }

    def __repr__(self) -> str:
        return f"Entity({self.name!r})"


def prop(name: str, value_type: str | PrimitiveType, *, nullable: bool = False) -> Property:
    """Convenience function to create a Property.

    Example:
        >>> title = prop("title", "str")
        >>> born = prop("born", PrimitiveType.DATE, nullable=True)
    """
    if isinstance(value_type, str):
        value_type = PrimitiveType.from_str(value_type)
    return Property(name=name, value_type=value_type, nullable=nullable)


def outgoing(
    name: str,
    relationship_type: str | Enum,
    multiplicity: Multiplicity,
    node: Entity,
) -> NodeViaRelationship:
    """Node reached through an outgoing relationship of the given type."""
    return NodeViaRelationship(name, relationship_type, multiplicity, Direction.OUTGOING, node)


def incoming(
    name: str,
    relationship_type: str | Enum,
    multiplicity: Multiplicity,
    node: Entity,
) -> NodeViaRelationship:
    """Node reached through an incoming relationship of the given type."""
    return NodeViaRelationship(name, relationship_type, multiplicity, Direction.INCOMING, node)


def outgoing_rel(name: str, multiplicity: Multiplicity, relationship: Entity) -> RelationshipHolder:
    """Relationship entity leaving the holding node."""
    return RelationshipHolder(name, multiplicity, Direction.OUTGOING, relationship)


def incoming_rel(name: str, multiplicity: Multiplicity, relationship: Entity) -> RelationshipHolder:
    """Relationship entity arriving at the holding node."""
    return RelationshipHolder(name, multiplicity, Direction.INCOMING, relationship)


def start(name: str, node: Entity) -> EndpointOfRelationship:
    return EndpointOfRelationship(name, Role.START, node)


def end(name: str, node: Entity) -> EndpointOfRelationship:
    return EndpointOfRelationship(name, Role.END, node)


def iter_reachable(roots: Iterable[Entity]) -> Iterator[Entity]:
    """Yield every entity reachable from ``roots`` once, breadth-first by identity."""
    seen: set[int] = set()
    pending = deque(roots)
    while pending:
        entity = pending.popleft()
        if id(entity) in seen:
            continue
        seen.add(id(entity))
        yield entity
        pending.extend(holder.target for holder in entity.entity_holders)
