"""
Schema merge for neogen.

The authoring layer builds entities as a rooted, possibly cyclic reference
graph in which the same concept may appear as several Entity objects (one
per declaration site). Merging binds every entity name to exactly one
canonical Entity and rewires all holders to it.

Invariants:
    - Roots are registered before any holder is followed, so an outermost
      declaration wins over a nested one with the same name
    - Each root's holders are followed breadth-first, including roots
      shadowed by an earlier root of the same name
    - A name already in the registry stops the descent (sharing and cycles)
    - After merge, holders referencing name N all point to the same object
    - The resulting MergedSchema is read-only

How to change safely:
    - Merge is a single non-reentrant pass; do not merge overlapping graphs
      concurrently
    - Never mutate entities of a MergedSchema; build a new graph instead

Example:
    >>> merger = SchemaMerger()
    >>> merger.add_root(Person)
    >>> schema = merger.merge()
    >>> schema["Person"] is Person
    True
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections import deque
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from ..errors import SchemaDefinitionError, SchemaFrozenError
from .types import Entity, iter_reachable

logger = logging.getLogger(__name__)


class SchemaMerger:
    """Collects root entities and canonicalizes their reference graph.

    The merger is the mutable phase of a schema. ``merge()`` consumes it and
    returns a MergedSchema; the merger cannot be reused afterwards.

    Example:
        >>> merger = SchemaMerger([Person, Company])
        >>> schema = merger.merge()
        >>> [root.name for root in schema.roots]
        ['Person', 'Company']
    """

    def __init__(self, roots: Optional[Iterable[Entity]] = None) -> None:
        self._roots: List[Entity] = list(roots or [])
        self._merged = False

    @property
    def merged(self) -> bool:
        return self._merged

    def add_root(self, entity: Entity) -> None:
        """Add a root entity.

        Raises:
            SchemaFrozenError: If merge() was already called
        """
        if self._merged:
            raise SchemaFrozenError(
                f"Cannot add root entity '{entity.name}': schema is already merged"
            )
        self._roots.append(entity)

    def merge(self) -> MergedSchema:
        """Canonicalize the reference graph in place.

        Returns:
            Read-only schema with one entity per distinct name

        Raises:
            SchemaFrozenError: If called twice, or if a holder of an entity
                from another merged schema would need rewiring
        """
        if self._merged:
            raise SchemaFrozenError("Schema is already merged")

        registry: Dict[str, Entity] = {}
        roots: List[Entity] = []
        walked: List[Entity] = []
        for root in self._roots:
            if any(root is seen for seen in walked):
                continue
            walked.append(root)
            existing = registry.get(root.name)
            if existing is None:
                registry[root.name] = root
                roots.append(root)
                logger.debug(f"Registered root entity: {root.name}")
            else:
                logger.debug(f"Root entity '{root.name}' shadowed by an earlier declaration")

        # Shadowed roots are walked too so their own references get merged.
        for root in walked:
            self._merge_from(root, registry)

        self._merged = True
        schema = MergedSchema(registry, roots)
        logger.info(
            f"Schema merged with {len(schema)} entities from {len(roots)} roots, "
            f"fingerprint={schema.fingerprint}"
        )
        return schema

    def _merge_from(self, root: Entity, registry: Dict[str, Entity]) -> None:
        pending = deque([root])
        while pending:
            entity = pending.popleft()
            for holder in entity.entity_holders:
                target = holder.target
                canonical = registry.get(target.name)
                if canonical is None:
                    registry[target.name] = target
                    pending.append(target)
                    logger.debug(f"Registered entity: {target.name} (via {entity.name}.{holder.name})")
                    continue
                if canonical is not target:
                    if entity.frozen:
                        raise SchemaFrozenError(
                            f"Cannot rewire '{entity.name}.{holder.name}': "
                            f"entity belongs to a merged schema"
                        )
                    holder.target = canonical
                    logger.debug(f"Rewired {entity.name}.{holder.name} to canonical '{target.name}'")


class MergedSchema(Mapping[str, Entity]):
    """Read-only registry of canonical entities keyed by name.

    This is the merged phase of a schema: lookups only. Its entities are
    frozen, so attributes cannot be added after merge.

    Attributes:
        roots: Canonical root entities in declaration order
        fingerprint: SHA-256 over the canonical dictionary form
    """

    def __init__(self, entities: Dict[str, Entity], roots: List[Entity]) -> None:
        self._entity_models_by_name: Mapping[str, Entity] = MappingProxyType(dict(entities))
        self._roots = tuple(roots)
        self._check_canonical()
        for entity in self._entity_models_by_name.values():
            entity.freeze()
        self._fingerprint = self._compute_fingerprint()

    @property
    def entity_models_by_name(self) -> Mapping[str, Entity]:
        return self._entity_models_by_name

    @property
    def entity_models(self) -> List[Entity]:
        """Canonical entities in registration order."""
        return list(self._entity_models_by_name.values())

    @property
    def roots(self) -> tuple[Entity, ...]:
        return self._roots

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def __getitem__(self, name: str) -> Entity:
        return self._entity_models_by_name[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entity_models_by_name)

    def __len__(self) -> int:
        return len(self._entity_models_by_name)

    def __setitem__(self, name: str, entity: Entity) -> None:
        raise SchemaFrozenError(f"Cannot register entity '{name}': schema is merged")

    def __delitem__(self, name: str) -> None:
        raise SchemaFrozenError(f"Cannot remove entity '{name}': schema is merged")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation, sorted by name for determinism."""
        return {
            "roots": [root.name for root in self._roots],
            "entities": [
                self._entity_models_by_name[name].to_dict()
                for name in sorted(self._entity_models_by_name)
            ],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def _check_canonical(self) -> None:
        """Every holder reachable from the roots must target its registry entry.

        Raises:
            SchemaDefinitionError: If a holder targets an unregistered or
                non-canonical entity
        """
        for entity in iter_reachable(self._roots):
            for holder in entity.entity_holders:
                target = holder.target
                if self._entity_models_by_name.get(target.name) is not target:
                    raise SchemaDefinitionError(
                        f"'{entity.name}.{holder.name}' references non-canonical entity "
                        f"'{target.name}'",
                        entity_name=entity.name,
                    )

    def _compute_fingerprint(self) -> str:
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        hash_bytes = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        return f"sha256:{hash_bytes}"

    def __repr__(self) -> str:
        return f"MergedSchema({list(self._entity_models_by_name)!r})"


def merge_schema(roots: Iterable[Entity]) -> MergedSchema:
    """Merge root entities into a canonical schema.

    Merging an already-canonical graph again is a no-op: the same Entity
    objects are registered under the same names.
    """
    return SchemaMerger(roots).merge()
