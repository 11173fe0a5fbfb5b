"""Integrity audit backed by SQL queries.

Each report runs in its own short read-only connection, separate from any
unit of work, so reports reflect whatever was committed when they ran.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select

from datamodeler.adapters.db.schema import (
    data_model_layers,
    data_model_object_relationships,
    data_model_objects,
)
from datamodeler.domain.model_graph import LayerKind
from datamodeler.interfaces.audit import (
    IntegrityAudit,
    LayerObjectCount,
    LayerRelationshipCount,
    OrphanEntry,
    OrphanReport,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine, Row
    from sqlalchemy.sql import Select

_rels = data_model_object_relationships
_layers = data_model_layers


def _entry(row: Row) -> OrphanEntry:
    return OrphanEntry(
        relationship_id=row.id,
        layer_id=row.model_id,
        source_model_object_id=row.source_model_object_id,
        target_model_object_id=row.target_model_object_id,
        relationship_type=row.type,
        source_layer_id=getattr(row, "source_layer_id", None),
        target_layer_id=getattr(row, "target_layer_id", None),
    )


class SqlAlchemyIntegrityAudit(IntegrityAudit):
    """Audit queries over the modeling tables."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def find_orphans(
        self, layer_id: int | None = None, limit: int | None = None
    ) -> OrphanReport:
        with self.engine.connect() as conn:
            return OrphanReport(
                missing_source=self._run(
                    conn, self._missing_endpoint("source_model_object_id"), layer_id, limit
                ),
                missing_target=self._run(
                    conn, self._missing_endpoint("target_model_object_id"), layer_id, limit
                ),
                cross_layer=self._run(conn, self._cross_layer(), layer_id, limit),
            )

    @staticmethod
    def _missing_endpoint(column: str) -> Select:
        obj = data_model_objects.alias("endpoint")
        return (
            select(_rels)
            .select_from(_rels.outerjoin(obj, obj.c.id == _rels.c[column]))
            .where(obj.c.id.is_(None))
        )

    @staticmethod
    def _cross_layer() -> Select:
        # inner joins: relationships missing an endpoint are reported elsewhere
        src = data_model_objects.alias("src")
        tgt = data_model_objects.alias("tgt")
        return (
            select(
                _rels,
                src.c.model_id.label("source_layer_id"),
                tgt.c.model_id.label("target_layer_id"),
            )
            .select_from(
                _rels.join(src, src.c.id == _rels.c.source_model_object_id).join(
                    tgt, tgt.c.id == _rels.c.target_model_object_id
                )
            )
            .where(
                or_(src.c.model_id != _rels.c.model_id, tgt.c.model_id != _rels.c.model_id)
            )
        )

    @staticmethod
    def _run(
        conn: Connection, stmt: Select, layer_id: int | None, limit: int | None
    ) -> tuple[OrphanEntry, ...]:
        if layer_id is not None:
            stmt = stmt.where(_rels.c.model_id == layer_id)
        stmt = stmt.order_by(_rels.c.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return tuple(_entry(row) for row in conn.execute(stmt))

    def relationship_counts(self) -> list[LayerRelationshipCount]:
        stmt = (
            select(
                _layers.c.id,
                _layers.c.name,
                _layers.c.layer,
                func.count(_rels.c.id).label("total"),
                func.count(_rels.c.source_model_object_id.distinct()).label("sources"),
                func.count(_rels.c.target_model_object_id.distinct()).label("targets"),
            )
            .select_from(_layers.outerjoin(_rels, _rels.c.model_id == _layers.c.id))
            .group_by(_layers.c.id, _layers.c.name, _layers.c.layer)
            .order_by(_layers.c.id)
        )
        with self.engine.connect() as conn:
            return [
                LayerRelationshipCount(
                    layer_id=row.id,
                    layer_name=row.name,
                    layer_kind=LayerKind(row.layer),
                    total_relationships=row.total,
                    unique_source_objects=row.sources,
                    unique_target_objects=row.targets,
                )
                for row in conn.execute(stmt)
            ]

    def object_counts(self) -> list[LayerObjectCount]:
        objs = data_model_objects
        stmt = (
            select(
                _layers.c.id,
                _layers.c.name,
                _layers.c.layer,
                func.count(objs.c.id).label("total"),
            )
            .select_from(_layers.outerjoin(objs, objs.c.model_id == _layers.c.id))
            .group_by(_layers.c.id, _layers.c.name, _layers.c.layer)
            .order_by(_layers.c.id)
        )
        with self.engine.connect() as conn:
            return [
                LayerObjectCount(
                    layer_id=row.id,
                    layer_name=row.name,
                    layer_kind=LayerKind(row.layer),
                    total_objects=row.total,
                )
                for row in conn.execute(stmt)
            ]
