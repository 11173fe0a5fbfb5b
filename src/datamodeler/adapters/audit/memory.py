"""Integrity audit over an `InMemoryData` store."""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

from datamodeler.adapters.repositories.memory import InMemoryData
from datamodeler.domain.model_graph import Relationship
from datamodeler.interfaces.audit import (
    IntegrityAudit,
    LayerObjectCount,
    LayerRelationshipCount,
    OrphanEntry,
    OrphanReport,
)


def _entry(rel: Relationship, source_layer_id=None, target_layer_id=None) -> OrphanEntry:
    return OrphanEntry(
        relationship_id=rel.id,
        layer_id=rel.model_id,
        source_model_object_id=rel.source_model_object_id,
        target_model_object_id=rel.target_model_object_id,
        relationship_type=rel.type.value,
        source_layer_id=source_layer_id,
        target_layer_id=target_layer_id,
    )


class InMemoryIntegrityAudit(IntegrityAudit):
    """Same reports as the SQL audit, computed from the in-memory store."""

    def __init__(self, data: InMemoryData):
        self.data = data

    def find_orphans(
        self, layer_id: int | None = None, limit: int | None = None
    ) -> OrphanReport:
        objects = self.data.objects
        rels = [
            rel
            for _, rel in sorted(self.data.relationships.items())
            if layer_id is None or rel.model_id == layer_id
        ]

        missing_source = (
            _entry(r) for r in rels if r.source_model_object_id not in objects
        )
        missing_target = (
            _entry(r) for r in rels if r.target_model_object_id not in objects
        )
        return OrphanReport(
            missing_source=tuple(islice(missing_source, limit)),
            missing_target=tuple(islice(missing_target, limit)),
            cross_layer=tuple(islice(self._cross_layer(rels), limit)),
        )

    def _cross_layer(self, rels: list[Relationship]) -> Iterator[OrphanEntry]:
        objects = self.data.objects
        for rel in rels:
            src = objects.get(rel.source_model_object_id)
            tgt = objects.get(rel.target_model_object_id)
            if src is None or tgt is None:
                continue
            if src.model_id != rel.model_id or tgt.model_id != rel.model_id:
                yield _entry(rel, src.model_id, tgt.model_id)

    def relationship_counts(self) -> list[LayerRelationshipCount]:
        counts = []
        for layer_id, layer in sorted(self.data.layers.items()):
            rels = [r for r in self.data.relationships.values() if r.model_id == layer_id]
            counts.append(
                LayerRelationshipCount(
                    layer_id=layer_id,
                    layer_name=layer.name,
                    layer_kind=layer.layer,
                    total_relationships=len(rels),
                    unique_source_objects=len({r.source_model_object_id for r in rels}),
                    unique_target_objects=len({r.target_model_object_id for r in rels}),
                )
            )
        return counts

    def object_counts(self) -> list[LayerObjectCount]:
        return [
            LayerObjectCount(
                layer_id=layer_id,
                layer_name=layer.name,
                layer_kind=layer.layer,
                total_objects=sum(
                    1 for obj in self.data.objects.values() if obj.model_id == layer_id
                ),
            )
            for layer_id, layer in sorted(self.data.layers.items())
        ]
