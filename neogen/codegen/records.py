"""
Record tree generation from entity graphs.

Generates one record type per distinct entity reachable from a root. Every
record gets a name that is unique within the generation pass:

    path  = entity names from the root down to the current entity
    cut   = max over distinct names of the index of their first occurrence
    name  = "".join(path[cut:])

A name that never repeats along its ancestor chain keeps its original form.
A repeated name is prefixed by just enough trailing ancestor names to tell
it apart, e.g. the path ``[A, B, A]`` names the inner entity ``BA``.

Rendered output, one block per record:

    Person(
      name: str,
      friends: List<Person>,
      employer: Company?,
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..config import GeneratorSettings, get_settings
from ..errors import RecordNameCollisionError
from ..schema.types import Attribute, AttributeKind, Entity, Multiplicity, PrimitiveType
from ..util.indented import IndentedStringBuilder, build_indented_string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrimitiveTypeExpr:
    primitive: PrimitiveType

    def notation(self) -> str:
        return self.primitive.value


@dataclass(frozen=True)
class OptionalTypeExpr:
    inner: TypeExpr

    def notation(self) -> str:
        return f"{self.inner.notation()}?"


@dataclass(frozen=True)
class ListTypeExpr:
    element: TypeExpr

    def notation(self) -> str:
        return f"List<{self.element.notation()}>"


@dataclass(frozen=True, eq=False)
class RecordTypeExpr:
    """Reference to a generated record; renders the record's final name."""

    record: Record

    def notation(self) -> str:
        return self.record.name


TypeExpr = Union[PrimitiveTypeExpr, OptionalTypeExpr, ListTypeExpr, RecordTypeExpr]


def with_multiplicity(type_expr: TypeExpr, multiplicity: Multiplicity) -> TypeExpr:
    """Wrap a type for the given multiplicity."""
    if multiplicity is Multiplicity.ONE:
        return type_expr
    if multiplicity is Multiplicity.ONE_OR_ZERO:
        return OptionalTypeExpr(type_expr)
    return ListTypeExpr(type_expr)


def attribute_type(attribute: Attribute, record_type: Callable[[Entity], TypeExpr]) -> TypeExpr:
    """Derive the record field type of an attribute.

    Args:
        attribute: The attribute to type
        record_type: Resolves an entity to its eventual record type

    Returns:
        The primitive type (optional when nullable) for properties, or the
        target record type wrapped for the holder's multiplicity
    """
    if attribute.kind is AttributeKind.PROPERTY:
        primitive = PrimitiveTypeExpr(attribute.value_type)
        return OptionalTypeExpr(primitive) if attribute.nullable else primitive
    return with_multiplicity(record_type(attribute.target), attribute.multiplicity)


@dataclass(eq=False)
class Record:
    """Generated record type mirroring one entity.

    Attributes:
        name: Disambiguated record name
        entity: The entity this record mirrors
        path: Entity names from the root to the entity's first occurrence
        fields: Field name to type expression, in attribute order
    """

    name: str
    entity: Entity = dataclass_field(repr=False)
    path: Tuple[str, ...] = ()
    fields: Dict[str, TypeExpr] = dataclass_field(default_factory=dict, repr=False)

    def append_code(self, builder: IndentedStringBuilder) -> None:
        builder.append(f"{self.name}(")
        with builder.indented():
            for field_name, type_expr in self.fields.items():
                builder.newline()
                builder.append(f"{field_name}: {type_expr.notation()},")
        builder.newline()
        builder.append(")")

    def code(self, tab: str = "  ") -> str:
        return build_indented_string(self.append_code, tab)


def disambiguated_name(path: Sequence[str]) -> str:
    """Compute the shortest collision-free record name for a path.

    Example:
        >>> disambiguated_name(["A", "B", "C"])
        'C'
        >>> disambiguated_name(["A", "B", "A"])
        'BA'
    """
    first_occurrence: Dict[str, int] = {}
    for index, name in enumerate(path):
        first_occurrence.setdefault(name, index)
    cut = max(first_occurrence.values())
    return "".join(path[cut:])


class RecordTreeGenerator:
    """Generates the record tree of one root entity.

    Naming runs as a dedicated depth-first pass before fields are
    populated. An entity object reached a second time (shared or cyclic
    reference) keeps the record of its first occurrence and is not
    descended into again.

    Example:
        >>> generator = RecordTreeGenerator(schema["Person"])
        >>> print(generator.code())
    """

    def __init__(self, root: Entity, settings: Optional[GeneratorSettings] = None) -> None:
        self._root = root
        self._settings = settings or get_settings()

    def generate(self) -> List[Record]:
        """Build one record per distinct entity, root first.

        Raises:
            RecordNameCollisionError: If two distinct entities end up with
                the same record name
        """
        records: Dict[int, Record] = {}
        ordered: List[Record] = []
        self._assign_names(self._root, (), records, ordered)
        self._check_unique_names(ordered)

        def record_type(entity: Entity) -> TypeExpr:
            return RecordTypeExpr(records[id(entity)])

        for record in ordered:
            for attribute in record.entity.attributes:
                record.fields[attribute.name] = attribute_type(attribute, record_type)
        return ordered

    def code(self) -> str:
        """Render every record as a type declaration block."""
        tab = self._settings.indent
        separator = "\n" * (self._settings.record_separator_lines + 1)
        blocks = [record.code(tab) for record in self.generate()]
        return separator.join(blocks) + "\n"

    def _assign_names(
        self,
        entity: Entity,
        prefixes: Tuple[str, ...],
        records: Dict[int, Record],
        ordered: List[Record],
    ) -> None:
        if id(entity) in records:
            return
        path = prefixes + (entity.name,)
        name = disambiguated_name(path)
        if name != entity.name:
            logger.debug(f"Renamed record {entity.name} to {name} (path {'/'.join(path)})")
        record = Record(name=name, entity=entity, path=path)
        records[id(entity)] = record
        ordered.append(record)
        for holder in entity.entity_holders:
            self._assign_names(holder.target, path, records, ordered)

    @staticmethod
    def _check_unique_names(records: List[Record]) -> None:
        by_name: Dict[str, Record] = {}
        for record in records:
            existing = by_name.get(record.name)
            if existing is not None:
                raise RecordNameCollisionError(record.name, [existing.path, record.path])
            by_name[record.name] = record


def generate_records(root: Entity, settings: Optional[GeneratorSettings] = None) -> List[Record]:
    return RecordTreeGenerator(root, settings).generate()


def record_tree_code(root: Entity, settings: Optional[GeneratorSettings] = None) -> str:
    """Render the record tree of ``root`` as text."""
    return RecordTreeGenerator(root, settings).code()
