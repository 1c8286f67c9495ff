"""
Indented text outline of an entity and everything it references.

Useful for eyeballing a merged schema:

    Person
      p name: str
      n friends: -[KNOWS]-> Person ...
      r jobs: -[WorksAt]-> WorksAt
        p since: date?
        E e company: Company
          p name: str
"""

from __future__ import annotations

from typing import List, Optional

from ..config import GeneratorSettings, get_settings
from ..schema.types import Attribute, AttributeKind, Entity
from ..util.indented import IndentedStringBuilder, build_indented_string


def _property_type(attribute: Attribute) -> str:
    suffix = "?" if attribute.nullable else ""
    return f"{attribute.value_type.value}{suffix}"


def _append_entity(builder: IndentedStringBuilder, entity: Entity, path: List[Entity]) -> None:
    path.append(entity)
    with builder.indented():
        for attribute in entity.attributes:
            builder.newline()
            _append_attribute(builder, attribute, path)
    path.pop()


def _append_attribute(builder: IndentedStringBuilder, attribute: Attribute, path: List[Entity]) -> None:
    kind = attribute.kind
    if kind is AttributeKind.PROPERTY:
        builder.append(f"p {attribute.name}: {_property_type(attribute)}")
        return

    target = attribute.target
    if kind is AttributeKind.NODE:
        direction = attribute.direction
        builder.append(
            f"n {attribute.name}: {direction.arrow_start}{attribute.relationship_type}"
            f"{direction.arrow_end} {target.name}"
        )
    elif kind is AttributeKind.RELATIONSHIP:
        direction = attribute.direction
        builder.append(
            f"r {attribute.name}: {direction.arrow_start}{target.name}{direction.arrow_end} {target.name}"
        )
    else:
        letter = attribute.role.name[0]
        builder.append(f"{letter} {letter.lower()} {attribute.name}: {target.name}")

    if any(target is visited for visited in path):
        builder.append(" ...")
        return
    _append_entity(builder, target, path)


def outline(entity: Entity, settings: Optional[GeneratorSettings] = None) -> str:
    """Render ``entity`` as an indented outline. Cycles end with `` ...``."""

    def build(builder: IndentedStringBuilder) -> None:
        builder.append(entity.name)
        _append_entity(builder, entity, [])

    return build_indented_string(build, (settings or get_settings()).indent)
