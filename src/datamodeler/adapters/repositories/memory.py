"""In-memory repositories.

All repositories of one unit of work share a single `InMemoryData` so that
lookups across collections (an object's layer, a relationship's endpoints)
see the same state. Ids are assigned per collection starting at 1, like the
database sequences. Nothing here enforces foreign keys; the service layer
performs the cascades explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from datamodeler.domain.business_domains import DataArea, Domain
from datamodeler.domain.model_graph import DataModel, Layer, ModelObject, Relationship
from datamodeler.domain.systems import DEFAULT_COLOR_CODE, DEFAULT_STATUS, System
from datamodeler.interfaces.repositories import (
    DataModelRepository,
    DomainRepository,
    LayerRepository,
    ObjectRepository,
    RelationshipRepository,
    SystemRepository,
)

# pylint: disable=redefined-builtin


@dataclass(slots=True)
class InMemoryData:
    """Shared backing store for the in-memory repositories and audit.

    Each mapping is keyed by entity id. Stored values are frozen dataclasses,
    so a shallow copy of the mappings is a consistent snapshot.
    """

    systems: dict[int, System] = field(default_factory=dict)
    domains: dict[int, Domain] = field(default_factory=dict)
    data_areas: dict[int, DataArea] = field(default_factory=dict)
    data_models: dict[int, DataModel] = field(default_factory=dict)
    layers: dict[int, Layer] = field(default_factory=dict)
    objects: dict[int, ModelObject] = field(default_factory=dict)
    relationships: dict[int, Relationship] = field(default_factory=dict)
    last_ids: dict[str, int] = field(default_factory=dict)

    def next_id(self, collection: str) -> int:
        """Allocate the next id of ``collection``."""
        self.last_ids[collection] = self.last_ids.get(collection, 0) + 1
        return self.last_ids[collection]

    def snapshot(self) -> InMemoryData:
        """Return a copy that `restore` can roll back to."""
        return InMemoryData(
            **{name: dict(getattr(self, name)) for name in self.__slots__}
        )

    def restore(self, snapshot: InMemoryData) -> None:
        """Replace the current contents with those of ``snapshot``."""
        for name in self.__slots__:
            setattr(self, name, dict(getattr(snapshot, name)))


class _InMemoryRepository:
    def __init__(self, data: InMemoryData):
        self.data = data


class InMemorySystemRepository(_InMemoryRepository, SystemRepository):
    """Systems kept in `InMemoryData.systems`."""

    def get(self, system_id: int) -> System | None:
        return self.data.systems.get(system_id)

    def get_by_name(self, name: str) -> System | None:
        return next((s for s in self.data.systems.values() if s.name == name), None)

    def list(self) -> list[System]:
        return [self.data.systems[key] for key in sorted(self.data.systems)]

    def add(self, system: System) -> System:
        now = datetime.now(timezone.utc)
        stored = replace(
            system,
            id=self.data.next_id("systems"),
            status=system.status or DEFAULT_STATUS,
            color_code=system.color_code or DEFAULT_COLOR_CODE,
            can_be_source=True if system.can_be_source is None else system.can_be_source,
            can_be_target=True if system.can_be_target is None else system.can_be_target,
            created_at=now,
            updated_at=now,
        )
        self.data.systems[stored.id] = stored
        return stored

    def update(self, system: System) -> System:
        current = self.data.systems[system.id]
        stored = replace(
            system,
            created_at=current.created_at,
            updated_at=datetime.now(timezone.utc),
        )
        self.data.systems[system.id] = stored
        return stored

    def delete(self, system_id: int) -> None:
        self.data.systems.pop(system_id, None)


class InMemoryDomainRepository(_InMemoryRepository, DomainRepository):
    """Domains and data areas kept in `InMemoryData`."""

    def get_domain(self, domain_id: int) -> Domain | None:
        return self.data.domains.get(domain_id)

    def get_domain_by_name(self, name: str) -> Domain | None:
        return next((d for d in self.data.domains.values() if d.name == name), None)

    def list_domains(self) -> list[Domain]:
        return [self.data.domains[key] for key in sorted(self.data.domains)]

    def add_domain(self, domain: Domain) -> Domain:
        stored = replace(domain, id=self.data.next_id("domains"))
        self.data.domains[stored.id] = stored
        return stored

    def get_data_area(self, data_area_id: int) -> DataArea | None:
        return self.data.data_areas.get(data_area_id)

    def list_data_areas(self, domain_id: int | None = None) -> list[DataArea]:
        return [
            area
            for _, area in sorted(self.data.data_areas.items())
            if domain_id is None or area.domain_id == domain_id
        ]

    def add_data_area(self, data_area: DataArea) -> DataArea:
        stored = replace(data_area, id=self.data.next_id("data_areas"))
        self.data.data_areas[stored.id] = stored
        return stored


class InMemoryDataModelRepository(_InMemoryRepository, DataModelRepository):
    """Data models kept in `InMemoryData.data_models`."""

    def get(self, data_model_id: int) -> DataModel | None:
        return self.data.data_models.get(data_model_id)

    def list(self) -> list[DataModel]:
        return [self.data.data_models[key] for key in sorted(self.data.data_models)]

    def add(self, data_model: DataModel) -> DataModel:
        stored = replace(data_model, id=self.data.next_id("data_models"))
        self.data.data_models[stored.id] = stored
        return stored

    def delete(self, data_model_id: int) -> None:
        self.data.data_models.pop(data_model_id, None)


class InMemoryLayerRepository(_InMemoryRepository, LayerRepository):
    """Layers kept in `InMemoryData.layers`."""

    def get(self, layer_id: int) -> Layer | None:
        return self.data.layers.get(layer_id)

    def list(self, data_model_id: int | None = None) -> list[Layer]:
        return [
            layer
            for _, layer in sorted(self.data.layers.items())
            if data_model_id is None or layer.data_model_id == data_model_id
        ]

    def add(self, layer: Layer) -> Layer:
        stored = replace(layer, id=self.data.next_id("layers"))
        self.data.layers[stored.id] = stored
        return stored

    def delete(self, layer_id: int) -> None:
        self.data.layers.pop(layer_id, None)


class InMemoryObjectRepository(_InMemoryRepository, ObjectRepository):
    """Objects kept in `InMemoryData.objects`. ``lock`` is accepted and ignored."""

    def get(self, object_id: int, *, lock: bool = False) -> ModelObject | None:
        return self.data.objects.get(object_id)

    def get_many(
        self, object_ids: Iterable[int], *, lock: bool = False
    ) -> dict[int, ModelObject]:
        return {
            oid: self.data.objects[oid]
            for oid in sorted(set(object_ids))
            if oid in self.data.objects
        }

    def list(self, layer_id: int | None = None) -> list[ModelObject]:
        return [
            obj
            for _, obj in sorted(self.data.objects.items())
            if layer_id is None or obj.model_id == layer_id
        ]

    def add(self, obj: ModelObject) -> ModelObject:
        stored = replace(obj, id=self.data.next_id("objects"))
        self.data.objects[stored.id] = stored
        return stored

    def update(self, obj: ModelObject) -> ModelObject:
        self.data.objects[obj.id] = obj
        return obj

    def delete(self, object_id: int) -> None:
        self.data.objects.pop(object_id, None)

    def delete_for_layer(self, layer_id: int) -> int:
        doomed = [oid for oid, obj in self.data.objects.items() if obj.model_id == layer_id]
        for oid in doomed:
            del self.data.objects[oid]
        return len(doomed)


class InMemoryRelationshipRepository(_InMemoryRepository, RelationshipRepository):
    """Relationships kept in `InMemoryData.relationships`."""

    def get(self, relationship_id: int) -> Relationship | None:
        return self.data.relationships.get(relationship_id)

    def list(self, layer_id: int | None = None) -> list[Relationship]:
        return [
            rel
            for _, rel in sorted(self.data.relationships.items())
            if layer_id is None or rel.model_id == layer_id
        ]

    def referencing(self, object_id: int) -> list[Relationship]:
        return [
            rel
            for _, rel in sorted(self.data.relationships.items())
            if object_id in (rel.source_model_object_id, rel.target_model_object_id)
        ]

    def add(self, relationship: Relationship) -> Relationship:
        stored = replace(relationship, id=self.data.next_id("relationships"))
        self.data.relationships[stored.id] = stored
        return stored

    def update(self, relationship: Relationship) -> Relationship:
        self.data.relationships[relationship.id] = relationship
        return relationship

    def delete(self, relationship_ids: Iterable[int]) -> None:
        for rid in relationship_ids:
            self.data.relationships.pop(rid, None)

    def delete_for_layer(self, layer_id: int) -> int:
        doomed = [
            rid for rid, rel in self.data.relationships.items() if rel.model_id == layer_id
        ]
        self.delete(doomed)
        return len(doomed)
