"""
Schema module for neogen.

This module provides the property graph schema model, including:
- Attribute and entity definitions (Property, the entity holders, Entity)
- Convenience constructors for declaring attributes
- Schema merge into a canonical, read-only registry

Invariants:
    - Entity names are identity keys
    - After merge, one Entity object exists per name
    - Merged schemas are never mutated
"""

from .merge import MergedSchema, SchemaMerger, merge_schema
from .types import (
    Attribute,
    AttributeKind,
    Direction,
    EndpointOfRelationship,
    Entity,
    EntityHolder,
    Multiplicity,
    NodeViaRelationship,
    PrimitiveType,
    Property,
    RelationshipHolder,
    Role,
    end,
    incoming,
    incoming_rel,
    iter_reachable,
    outgoing,
    outgoing_rel,
    prop,
    start,
)

__all__ = [
    # Types
    "Attribute",
    "AttributeKind",
    "Direction",
    "EndpointOfRelationship",
    "Entity",
    "EntityHolder",
    "Multiplicity",
    "NodeViaRelationship",
    "PrimitiveType",
    "Property",
    "RelationshipHolder",
    "Role",
    # Declaration helpers
    "prop",
    "outgoing",
    "incoming",
    "outgoing_rel",
    "incoming_rel",
    "start",
    "end",
    "iter_reachable",
    # Merge
    "SchemaMerger",
    "MergedSchema",
    "merge_schema",
]
