"""SQLAlchemy Core implementations of the repository ports.

Every repository works on the Connection owned by the surrounding unit of
work and never commits. Row locks requested with ``lock=True`` become
``SELECT ... FOR UPDATE`` on Postgres; SQLite has no row locks and serializes
writers at the database level instead, so the clause is dropped there by the
dialect.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, or_, select, update

from datamodeler.adapters.db.schema import (
    data_areas,
    data_domains,
    data_model_layers,
    data_model_object_relationships,
    data_model_objects,
    data_models,
    systems,
)
from datamodeler.domain.business_domains import DataArea, Domain
from datamodeler.domain.model_graph import (
    DataModel,
    Layer,
    LayerKind,
    ModelObject,
    Position,
    Relationship,
    RelationshipLevel,
    RelationshipType,
)
from datamodeler.domain.systems import System
from datamodeler.interfaces.repositories import (
    DataModelRepository,
    DomainRepository,
    LayerRepository,
    ObjectRepository,
    RelationshipRepository,
    SystemRepository,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Row

# pylint: disable=redefined-builtin


def _now() -> datetime:
    return datetime.now(timezone.utc)


class _SqlAlchemyRepository:
    """Holds the unit of work's connection."""

    def __init__(self, connection: Connection):
        self.connection = connection


# --- systems ---


def _system_from_row(row: Row) -> System:
    return System(
        id=row.id,
        name=row.name,
        category=row.category,
        type=row.type,
        description=row.description,
        connection_string=row.connection_string,
        configuration=row.configuration,
        status=row.status,
        can_be_source=row.can_be_source,
        can_be_target=row.can_be_target,
        color_code=row.color_code,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _system_values(system: System) -> dict[str, Any]:
    values = {
        "name": system.name,
        "category": system.category,
        "type": system.type,
        "description": system.description,
        "connection_string": system.connection_string,
        "configuration": dict(system.configuration or {}),
        "status": system.status,
        "can_be_source": system.can_be_source,
        "can_be_target": system.can_be_target,
        "color_code": system.color_code,
    }
    # let server defaults apply instead of writing NULL
    return {key: value for key, value in values.items() if value is not None}


class SqlAlchemySystemRepository(_SqlAlchemyRepository, SystemRepository):
    """Systems stored in the ``systems`` table."""

    def get(self, system_id: int) -> System | None:
        stmt = select(systems).where(systems.c.id == system_id)
        row = self.connection.execute(stmt).fetchone()
        return _system_from_row(row) if row else None

    def get_by_name(self, name: str) -> System | None:
        stmt = select(systems).where(systems.c.name == name)
        row = self.connection.execute(stmt).fetchone()
        return _system_from_row(row) if row else None

    def list(self) -> list[System]:
        rows = self.connection.execute(select(systems).order_by(systems.c.id))
        return [_system_from_row(row) for row in rows]

    def add(self, system: System) -> System:
        result = self.connection.execute(
            systems.insert().values(**_system_values(system))
        )
        stored = self.get(result.inserted_primary_key[0])
        assert stored is not None
        return stored

    def update(self, system: System) -> System:
        self.connection.execute(
            update(systems)
            .where(systems.c.id == system.id)
            .values(**_system_values(system), updated_at=_now())
        )
        stored = self.get(system.id)
        assert stored is not None
        return stored

    def delete(self, system_id: int) -> None:
        self.connection.execute(delete(systems).where(systems.c.id == system_id))


# --- domains & data areas ---


def _domain_from_row(row: Row) -> Domain:
    return Domain(
        id=row.id,
        name=row.name,
        description=row.description,
        color_code=row.color_code,
    )


def _data_area_from_row(row: Row) -> DataArea:
    return DataArea(
        id=row.id,
        name=row.name,
        domain_id=row.domain_id,
        description=row.description,
        color_code=row.color_code,
    )


class SqlAlchemyDomainRepository(_SqlAlchemyRepository, DomainRepository):
    """Domains and data areas stored in ``data_domains`` / ``data_areas``."""

    def get_domain(self, domain_id: int) -> Domain | None:
        stmt = select(data_domains).where(data_domains.c.id == domain_id)
        row = self.connection.execute(stmt).fetchone()
        return _domain_from_row(row) if row else None

    def get_domain_by_name(self, name: str) -> Domain | None:
        stmt = select(data_domains).where(data_domains.c.name == name)
        row = self.connection.execute(stmt).fetchone()
        return _domain_from_row(row) if row else None

    def list_domains(self) -> list[Domain]:
        rows = self.connection.execute(
            select(data_domains).order_by(data_domains.c.id)
        )
        return [_domain_from_row(row) for row in rows]

    def add_domain(self, domain: Domain) -> Domain:
        result = self.connection.execute(
            data_domains.insert().values(
                name=domain.name,
                description=domain.description,
                color_code=domain.color_code,
            )
        )
        return replace(domain, id=result.inserted_primary_key[0])

    def get_data_area(self, data_area_id: int) -> DataArea | None:
        stmt = select(data_areas).where(data_areas.c.id == data_area_id)
        row = self.connection.execute(stmt).fetchone()
        return _data_area_from_row(row) if row else None

    def list_data_areas(self, domain_id: int | None = None) -> list[DataArea]:
        stmt = select(data_areas).order_by(data_areas.c.id)
        if domain_id is not None:
            stmt = stmt.where(data_areas.c.domain_id == domain_id)
        return [_data_area_from_row(row) for row in self.connection.execute(stmt)]

    def add_data_area(self, data_area: DataArea) -> DataArea:
        result = self.connection.execute(
            data_areas.insert().values(
                name=data_area.name,
                domain_id=data_area.domain_id,
                description=data_area.description,
                color_code=data_area.color_code,
            )
        )
        return replace(data_area, id=result.inserted_primary_key[0])


# --- data models & layers ---


def _data_model_from_row(row: Row) -> DataModel:
    return DataModel(
        id=row.id,
        name=row.name,
        description=row.description,
        target_system_id=row.target_system_id,
        domain_id=row.domain_id,
        data_area_id=row.data_area_id,
    )


def _layer_from_row(row: Row) -> Layer:
    return Layer(
        id=row.id,
        data_model_id=row.data_model_id,
        name=row.name,
        layer=LayerKind(row.layer),
        target_system_id=row.target_system_id,
    )


class SqlAlchemyDataModelRepository(_SqlAlchemyRepository, DataModelRepository):
    """Data models stored in ``data_models``."""

    def get(self, data_model_id: int) -> DataModel | None:
        stmt = select(data_models).where(data_models.c.id == data_model_id)
        row = self.connection.execute(stmt).fetchone()
        return _data_model_from_row(row) if row else None

    def list(self) -> list[DataModel]:
        rows = self.connection.execute(select(data_models).order_by(data_models.c.id))
        return [_data_model_from_row(row) for row in rows]

    def add(self, data_model: DataModel) -> DataModel:
        result = self.connection.execute(
            data_models.insert().values(
                name=data_model.name,
                description=data_model.description,
                target_system_id=data_model.target_system_id,
                domain_id=data_model.domain_id,
                data_area_id=data_model.data_area_id,
            )
        )
        return replace(data_model, id=result.inserted_primary_key[0])

    def delete(self, data_model_id: int) -> None:
        self.connection.execute(
            delete(data_models).where(data_models.c.id == data_model_id)
        )


class SqlAlchemyLayerRepository(_SqlAlchemyRepository, LayerRepository):
    """Layers stored in ``data_model_layers``."""

    def get(self, layer_id: int) -> Layer | None:
        stmt = select(data_model_layers).where(data_model_layers.c.id == layer_id)
        row = self.connection.execute(stmt).fetchone()
        return _layer_from_row(row) if row else None

    def list(self, data_model_id: int | None = None) -> list[Layer]:
        stmt = select(data_model_layers).order_by(data_model_layers.c.id)
        if data_model_id is not None:
            stmt = stmt.where(data_model_layers.c.data_model_id == data_model_id)
        return [_layer_from_row(row) for row in self.connection.execute(stmt)]

    def add(self, layer: Layer) -> Layer:
        result = self.connection.execute(
            data_model_layers.insert().values(
                data_model_id=layer.data_model_id,
                name=layer.name,
                layer=LayerKind(layer.layer).value,
                target_system_id=layer.target_system_id,
            )
        )
        return replace(layer, id=result.inserted_primary_key[0])

    def delete(self, layer_id: int) -> None:
        self.connection.execute(
            delete(data_model_layers).where(data_model_layers.c.id == layer_id)
        )


# --- objects ---


def _object_from_row(row: Row) -> ModelObject:
    position = row.position
    return ModelObject(
        id=row.id,
        model_id=row.model_id,
        name=row.name,
        object_type=row.object_type,
        description=row.description,
        position=Position(position["x"], position["y"]) if position else None,
        target_system_id=row.target_system_id,
        is_visible=row.is_visible,
    )


def _object_values(obj: ModelObject) -> dict[str, Any]:
    return {
        "model_id": obj.model_id,
        "name": obj.name,
        "object_type": obj.object_type,
        "description": obj.description,
        "position": (
            {"x": obj.position.x, "y": obj.position.y} if obj.position else None
        ),
        "target_system_id": obj.target_system_id,
        "is_visible": obj.is_visible,
    }


class SqlAlchemyObjectRepository(_SqlAlchemyRepository, ObjectRepository):
    """Objects stored in ``data_model_objects``."""

    def get(self, object_id: int, *, lock: bool = False) -> ModelObject | None:
        return self.get_many([object_id], lock=lock).get(object_id)

    def get_many(
        self, object_ids: Iterable[int], *, lock: bool = False
    ) -> dict[int, ModelObject]:
        ids = sorted(set(object_ids))
        if not ids:
            return {}
        # sorted ids keep lock acquisition order stable across transactions
        stmt = (
            select(data_model_objects)
            .where(data_model_objects.c.id.in_(ids))
            .order_by(data_model_objects.c.id)
        )
        if lock:
            stmt = stmt.with_for_update()
        return {row.id: _object_from_row(row) for row in self.connection.execute(stmt)}

    def list(self, layer_id: int | None = None) -> list[ModelObject]:
        stmt = select(data_model_objects).order_by(data_model_objects.c.id)
        if layer_id is not None:
            stmt = stmt.where(data_model_objects.c.model_id == layer_id)
        return [_object_from_row(row) for row in self.connection.execute(stmt)]

    def add(self, obj: ModelObject) -> ModelObject:
        result = self.connection.execute(
            data_model_objects.insert().values(**_object_values(obj))
        )
        return replace(obj, id=result.inserted_primary_key[0])

    def update(self, obj: ModelObject) -> ModelObject:
        self.connection.execute(
            update(data_model_objects)
            .where(data_model_objects.c.id == obj.id)
            .values(**_object_values(obj), updated_at=_now())
        )
        return obj

    def delete(self, object_id: int) -> None:
        self.connection.execute(
            delete(data_model_objects).where(data_model_objects.c.id == object_id)
        )

    def delete_for_layer(self, layer_id: int) -> int:
        result = self.connection.execute(
            delete(data_model_objects).where(data_model_objects.c.model_id == layer_id)
        )
        return result.rowcount


# --- relationships ---

_rels = data_model_object_relationships


def _relationship_from_row(row: Row) -> Relationship:
    return Relationship(
        id=row.id,
        model_id=row.model_id,
        source_model_object_id=row.source_model_object_id,
        target_model_object_id=row.target_model_object_id,
        type=RelationshipType.parse(row.type),
        relationship_level=RelationshipLevel(row.relationship_level),
        name=row.name,
        description=row.description,
    )


def _relationship_values(relationship: Relationship) -> dict[str, Any]:
    return {
        "model_id": relationship.model_id,
        "source_model_object_id": relationship.source_model_object_id,
        "target_model_object_id": relationship.target_model_object_id,
        "type": RelationshipType.parse(relationship.type).value,
        "relationship_level": RelationshipLevel(relationship.relationship_level).value,
        "name": relationship.name,
        "description": relationship.description,
    }


class SqlAlchemyRelationshipRepository(_SqlAlchemyRepository, RelationshipRepository):
    """Relationships stored in ``data_model_object_relationships``."""

    def get(self, relationship_id: int) -> Relationship | None:
        stmt = select(_rels).where(_rels.c.id == relationship_id)
        row = self.connection.execute(stmt).fetchone()
        return _relationship_from_row(row) if row else None

    def list(self, layer_id: int | None = None) -> list[Relationship]:
        stmt = select(_rels).order_by(_rels.c.id)
        if layer_id is not None:
            stmt = stmt.where(_rels.c.model_id == layer_id)
        return [_relationship_from_row(row) for row in self.connection.execute(stmt)]

    def referencing(self, object_id: int) -> list[Relationship]:
        stmt = (
            select(_rels)
            .where(
                or_(
                    _rels.c.source_model_object_id == object_id,
                    _rels.c.target_model_object_id == object_id,
                )
            )
            .order_by(_rels.c.id)
        )
        return [_relationship_from_row(row) for row in self.connection.execute(stmt)]

    def add(self, relationship: Relationship) -> Relationship:
        result = self.connection.execute(
            _rels.insert().values(**_relationship_values(relationship))
        )
        return replace(relationship, id=result.inserted_primary_key[0])

    def update(self, relationship: Relationship) -> Relationship:
        self.connection.execute(
            update(_rels)
            .where(_rels.c.id == relationship.id)
            .values(**_relationship_values(relationship), updated_at=_now())
        )
        return relationship

    def delete(self, relationship_ids: Iterable[int]) -> None:
        if ids := list(relationship_ids):
            self.connection.execute(delete(_rels).where(_rels.c.id.in_(ids)))

    def delete_for_layer(self, layer_id: int) -> int:
        result = self.connection.execute(
            delete(_rels).where(_rels.c.model_id == layer_id)
        )
        return result.rowcount

