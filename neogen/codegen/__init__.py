"""
Code generation from merged schemas.

This module provides the two text artifacts derived from an entity graph:
- Record trees: one collision-free record type per reachable entity
- Cypher fragments: map projections with nested pattern comprehensions

Plus an outline renderer for inspecting a schema.

Invariants:
    - Generators only read the entity graph; they never mutate it
    - Output is returned whole or not at all
"""

from .cypher import CypherFragmentEmitter, query_fragment
from .outline import outline
from .records import (
    ListTypeExpr,
    OptionalTypeExpr,
    PrimitiveTypeExpr,
    Record,
    RecordTreeGenerator,
    RecordTypeExpr,
    TypeExpr,
    attribute_type,
    disambiguated_name,
    generate_records,
    record_tree_code,
    with_multiplicity,
)

__all__ = [
    # Records
    "Record",
    "RecordTreeGenerator",
    "generate_records",
    "record_tree_code",
    "disambiguated_name",
    "attribute_type",
    "with_multiplicity",
    "TypeExpr",
    "PrimitiveTypeExpr",
    "OptionalTypeExpr",
    "ListTypeExpr",
    "RecordTypeExpr",
    # Cypher
    "CypherFragmentEmitter",
    "query_fragment",
    # Outline
    "outline",
]
