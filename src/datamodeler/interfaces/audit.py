"""Integrity audit port.

Read-only consistency reports over layers, objects and relationships. Writes
through the service layer keep the graph consistent; the audit exists to find
rows that predate that enforcement or were written around it. Reports may
reflect a slightly stale snapshot.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field

from datamodeler.domain.model_graph import LayerKind


@dataclass(frozen=True, slots=True)
class OrphanEntry:
    """A relationship found by one of the orphan checks.

    ``source_layer_id`` / ``target_layer_id`` are only known for the
    cross-layer check, where both endpoints exist.
    """

    relationship_id: int
    layer_id: int
    source_model_object_id: int
    target_model_object_id: int
    relationship_type: str
    source_layer_id: int | None = None
    target_layer_id: int | None = None


@dataclass(frozen=True, slots=True)
class OrphanReport:
    """Result of `IntegrityAudit.find_orphans`.

    A relationship missing an endpoint is listed under the missing category
    only, never under ``cross_layer``. One missing both endpoints appears in
    both missing lists.
    """

    missing_source: tuple[OrphanEntry, ...] = field(default_factory=tuple)
    missing_target: tuple[OrphanEntry, ...] = field(default_factory=tuple)
    cross_layer: tuple[OrphanEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        """True when no orphan of any kind was found."""
        return not (self.missing_source or self.missing_target or self.cross_layer)

    @property
    def relationship_ids(self) -> set[int]:
        """Ids of every relationship found, across categories."""
        return {
            entry.relationship_id
            for entries in (self.missing_source, self.missing_target, self.cross_layer)
            for entry in entries
        }


@dataclass(frozen=True, slots=True)
class LayerRelationshipCount:
    """Relationship totals of one layer."""

    layer_id: int
    layer_name: str
    layer_kind: LayerKind
    total_relationships: int
    unique_source_objects: int
    unique_target_objects: int


@dataclass(frozen=True, slots=True)
class LayerObjectCount:
    """Object total of one layer."""

    layer_id: int
    layer_name: str
    layer_kind: LayerKind
    total_objects: int


class IntegrityAudit(abc.ABC):
    """Read-only integrity reports."""

    @abc.abstractmethod
    def find_orphans(
        self, layer_id: int | None = None, limit: int | None = None
    ) -> OrphanReport:
        """Find relationships breaking the graph rules.

        Args:
            layer_id: Only consider relationships declared in this layer.
            limit: Maximum number of entries per category (ordered by
                relationship id); None for all.

        Returns:
            OrphanReport: Missing-source, missing-target and cross-layer entries.
        """

    @abc.abstractmethod
    def relationship_counts(self) -> list[LayerRelationshipCount]:
        """Relationship totals per layer, for every layer, ordered by layer id."""

    @abc.abstractmethod
    def object_counts(self) -> list[LayerObjectCount]:
        """Object totals per layer, for every layer, ordered by layer id."""
