"""
Cypher query fragment emission.

Renders an entity bound to a variable as a map projection. Nested node and
relationship holders become pattern comprehensions with freshly allocated
variables:

    {`name`:v0.name,`friends`:[(v0)-[:KNOWS]->(v1)|{`name`:v1.name}]}

Relationship holders bind the relationship itself and use the relationship
entity's name as the type. The opposite endpoint gets a variable so the
pattern matches it, but only the relationship's fields are projected:

    {`jobs`:[(v0)-[v1:WORKS_AT]->(v2)|{`since`:v1.since}]}

Invariants:
    - Fields appear in attribute order, comma separated, no trailing comma
    - Variables are <prefix>0, <prefix>1, ... per emitter instance, never reused;
      a caller-bound variable is reserved and skipped by the counter
    - An entity already on the traversal path is projected with its
      properties only, so cyclic schemas terminate
    - Endpoint (start/end) attributes raise UnsupportedConstructError
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from ..config import GeneratorSettings, get_settings
from ..errors import UnsupportedConstructError
from ..schema.types import Attribute, AttributeKind, Entity
from ..util.indented import IndentedStringBuilder, build_indented_string

logger = logging.getLogger(__name__)


class CypherFragmentEmitter:
    """Emits Cypher map projections for entities.

    One emitter owns one variable counter. Do not share an emitter between
    concurrent emissions.

    Example:
        >>> emitter = CypherFragmentEmitter()
        >>> emitter.emit(person)
        '{`name`:v0.name}'
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None) -> None:
        self._settings = settings or get_settings()
        self._var_number = 0
        self._used_variables: Set[str] = set()

    def variable(self) -> str:
        """Allocate a fresh variable name, skipping names already bound."""
        name = f"{self._settings.variable_prefix}{self._var_number}"
        while name in self._used_variables:
            self._var_number += 1
            name = f"{self._settings.variable_prefix}{self._var_number}"
        self._var_number += 1
        self._used_variables.add(name)
        return name

    def emit(self, entity: Entity, var_name: Optional[str] = None) -> str:
        """Render ``entity`` bound to ``var_name``.

        Args:
            entity: Entity to project
            var_name: Variable bound to the entity; a fresh one is
                allocated when omitted. A given name is reserved, so no
                nested variable reuses it

        Returns:
            The complete fragment text

        Raises:
            UnsupportedConstructError: If an endpoint attribute is reached
        """
        if var_name is None:
            var_name = self.variable()
        else:
            self._used_variables.add(var_name)
        return build_indented_string(
            lambda builder: self._append_entity(builder, entity, var_name, []),
            self._settings.indent,
        )

    def _append_entity(
        self,
        builder: IndentedStringBuilder,
        entity: Entity,
        var_name: str,
        path: List[Entity],
    ) -> None:
        attributes = entity.attributes
        if any(entity is visited for visited in path):
            logger.debug(f"Cycle at entity '{entity.name}': projecting properties only")
            attributes = entity.properties

        path.append(entity)
        builder.append("{")
        for index, attribute in enumerate(attributes):
            if index:
                builder.append(",")
            self._append_attribute(builder, entity, attribute, var_name, path)
        builder.append("}")
        path.pop()

    def _append_attribute(
        self,
        builder: IndentedStringBuilder,
        entity: Entity,
        attribute: Attribute,
        var_name: str,
        path: List[Entity],
    ) -> None:
        kind = attribute.kind
        name = attribute.name

        if kind is AttributeKind.PROPERTY:
            builder.append(f"`{name}`:{var_name}.{name}")

        elif kind is AttributeKind.NODE:
            direction = attribute.direction
            node_var = self.variable()
            builder.append(f"`{name}`:[")
            builder.append(
                f"({var_name}){direction.arrow_start}:{attribute.relationship_type}"
                f"{direction.arrow_end}({node_var})"
            )
            builder.append("|")
            self._append_entity(builder, attribute.target, node_var, path)
            builder.append("]")

        elif kind is AttributeKind.RELATIONSHIP:
            # The opposite endpoint is matched but not projected.
            direction = attribute.direction
            rel_var = self.variable()
            node_var = self.variable()
            builder.append(f"`{name}`:[")
            builder.append(
                f"({var_name}){direction.arrow_start}{rel_var}:{attribute.target.name}"
                f"{direction.arrow_end}({node_var})"
            )
            builder.append("|")
            self._append_entity(builder, attribute.target, rel_var, path)
            builder.append("]")

        elif kind is AttributeKind.ENDPOINT:
            raise UnsupportedConstructError(entity.name, name, f"{attribute.role.value} endpoint")

        else:
            raise UnsupportedConstructError(entity.name, name, kind.value)


def query_fragment(
    entity: Entity,
    var_name: Optional[str] = None,
    settings: Optional[GeneratorSettings] = None,
) -> str:
    """Render ``entity`` with a fresh emitter, so variables start at ``v0``."""
    return CypherFragmentEmitter(settings).emit(entity, var_name)
