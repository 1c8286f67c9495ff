"""
neogen - record types and Cypher projections from property graph schemas.

A schema is declared as Entity objects (node and relationship types) whose
attributes are scalar properties or references to other entities. The same
entity type may be reached through many paths, and references may form
cycles.

Pipeline:
    root entities ──▶ SchemaMerger ──▶ MergedSchema ──┬──▶ RecordTreeGenerator ──▶ record text
                                                      └──▶ CypherFragmentEmitter ─▶ query fragments

Invariants:
    - Entity names are identity keys; merge leaves one Entity per name
    - Merged schemas are read-only
    - Generators are read-only traversals and fail fast on invalid input

Example:
    >>> from neogen import Entity, Multiplicity, merge_schema, outgoing, prop
    >>> from neogen import query_fragment, record_tree_code
    >>> Person = Entity("Person", prop("name", "str"))
    >>> Person.add(outgoing("friends", "KNOWS", Multiplicity.MANY, Person))
    Entity('Person')
    >>> schema = merge_schema([Person])
    >>> query_fragment(schema["Person"])
    '{`name`:v0.name,`friends`:[(v0)-[:KNOWS]->(v1)|{`name`:v1.name}]}'
"""

from ._version import __version__
from .codegen import (
    CypherFragmentEmitter,
    Record,
    RecordTreeGenerator,
    generate_records,
    outline,
    query_fragment,
    record_tree_code,
)
from .config import GeneratorSettings, get_settings
from .errors import (
    DuplicateAttributeError,
    NeogenError,
    RecordNameCollisionError,
    SchemaDefinitionError,
    SchemaFrozenError,
    UnsupportedConstructError,
)
from .schema import (
    AttributeKind,
    Direction,
    EndpointOfRelationship,
    Entity,
    MergedSchema,
    Multiplicity,
    NodeViaRelationship,
    PrimitiveType,
    Property,
    RelationshipHolder,
    Role,
    SchemaMerger,
    end,
    incoming,
    incoming_rel,
    merge_schema,
    outgoing,
    outgoing_rel,
    prop,
    start,
)

__all__ = [
    "__version__",
    # Schema
    "AttributeKind",
    "Direction",
    "EndpointOfRelationship",
    "Entity",
    "MergedSchema",
    "Multiplicity",
    "NodeViaRelationship",
    "PrimitiveType",
    "Property",
    "RelationshipHolder",
    "Role",
    "SchemaMerger",
    "merge_schema",
    "prop",
    "outgoing",
    "incoming",
    "outgoing_rel",
    "incoming_rel",
    "start",
    "end",
    # Codegen
    "CypherFragmentEmitter",
    "Record",
    "RecordTreeGenerator",
    "generate_records",
    "outline",
    "query_fragment",
    "record_tree_code",
    # Config
    "GeneratorSettings",
    "get_settings",
    # Errors
    "NeogenError",
    "SchemaDefinitionError",
    "DuplicateAttributeError",
    "SchemaFrozenError",
    "UnsupportedConstructError",
    "RecordNameCollisionError",
]
