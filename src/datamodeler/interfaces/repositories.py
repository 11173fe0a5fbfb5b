"""Repository ports for the persistence boundary.

One repository per entity collection. Implementations assign ids on ``add``
and return the stored value; lookups return None (or an empty collection) for
unknown ids and never raise. Integrity rules are not the repositories' job:
the service layer checks them inside the surrounding unit of work before it
writes.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable

from datamodeler.domain.business_domains import DataArea, Domain
from datamodeler.domain.model_graph import DataModel, Layer, ModelObject, Relationship
from datamodeler.domain.systems import System


class SystemRepository(abc.ABC):
    """Stored systems, keyed by id; names are unique."""

    @abc.abstractmethod
    def get(self, system_id: int) -> System | None:
        """Return the system with ``system_id``, or None."""

    @abc.abstractmethod
    def get_by_name(self, name: str) -> System | None:
        """Return the system named ``name``, or None."""

    @abc.abstractmethod
    def list(self) -> list[System]:
        """Return all systems ordered by id."""

    @abc.abstractmethod
    def add(self, system: System) -> System:
        """Insert a new system and return it with its assigned id."""

    @abc.abstractmethod
    def update(self, system: System) -> System:
        """Overwrite the stored system with the same id and return it."""

    @abc.abstractmethod
    def delete(self, system_id: int) -> None:
        """Delete a system; unknown ids are a no-op."""


class DomainRepository(abc.ABC):
    """Business domains and their data areas."""

    @abc.abstractmethod
    def get_domain(self, domain_id: int) -> Domain | None:
        """Return the domain with ``domain_id``, or None."""

    @abc.abstractmethod
    def get_domain_by_name(self, name: str) -> Domain | None:
        """Return the domain named ``name``, or None."""

    @abc.abstractmethod
    def list_domains(self) -> list[Domain]:
        """Return all domains ordered by id."""

    @abc.abstractmethod
    def add_domain(self, domain: Domain) -> Domain:
        """Insert a domain and return it with its assigned id."""

    @abc.abstractmethod
    def get_data_area(self, data_area_id: int) -> DataArea | None:
        """Return the data area with ``data_area_id``, or None."""

    @abc.abstractmethod
    def list_data_areas(self, domain_id: int | None = None) -> list[DataArea]:
        """Return data areas ordered by id, optionally for one domain only."""

    @abc.abstractmethod
    def add_data_area(self, data_area: DataArea) -> DataArea:
        """Insert a data area and return it with its assigned id."""


class DataModelRepository(abc.ABC):
    """Data models (the parents of layers)."""

    @abc.abstractmethod
    def get(self, data_model_id: int) -> DataModel | None:
        """Return the data model with ``data_model_id``, or None."""

    @abc.abstractmethod
    def list(self) -> list[DataModel]:
        """Return all data models ordered by id."""

    @abc.abstractmethod
    def add(self, data_model: DataModel) -> DataModel:
        """Insert a data model and return it with its assigned id."""

    @abc.abstractmethod
    def delete(self, data_model_id: int) -> None:
        """Delete a data model row; unknown ids are a no-op."""


class LayerRepository(abc.ABC):
    """Layers of data models."""

    @abc.abstractmethod
    def get(self, layer_id: int) -> Layer | None:
        """Return the layer with ``layer_id``, or None."""

    @abc.abstractmethod
    def list(self, data_model_id: int | None = None) -> list[Layer]:
        """Return layers ordered by id, optionally for one data model only."""

    @abc.abstractmethod
    def add(self, layer: Layer) -> Layer:
        """Insert a layer and return it with its assigned id."""

    @abc.abstractmethod
    def delete(self, layer_id: int) -> None:
        """Delete a layer row; unknown ids are a no-op."""


class ObjectRepository(abc.ABC):
    """Objects placed in layers."""

    @abc.abstractmethod
    def get(self, object_id: int, *, lock: bool = False) -> ModelObject | None:
        """Return the object with ``object_id``, or None.

        Args:
            object_id: The object id.
            lock: Hold a row lock until the unit of work ends, where the
                backend supports it.
        """

    @abc.abstractmethod
    def get_many(
        self, object_ids: Iterable[int], *, lock: bool = False
    ) -> dict[int, ModelObject]:
        """Return the existing objects among ``object_ids``, keyed by id.

        Unknown ids are simply absent from the result.
        """

    @abc.abstractmethod
    def list(self, layer_id: int | None = None) -> list[ModelObject]:
        """Return objects ordered by id, optionally for one layer only."""

    @abc.abstractmethod
    def add(self, obj: ModelObject) -> ModelObject:
        """Insert an object and return it with its assigned id."""

    @abc.abstractmethod
    def update(self, obj: ModelObject) -> ModelObject:
        """Overwrite the stored object with the same id and return it."""

    @abc.abstractmethod
    def delete(self, object_id: int) -> None:
        """Delete an object row; unknown ids are a no-op."""

    @abc.abstractmethod
    def delete_for_layer(self, layer_id: int) -> int:
        """Delete every object of a layer and return how many were removed."""


class RelationshipRepository(abc.ABC):
    """Relationships between objects."""

    @abc.abstractmethod
    def get(self, relationship_id: int) -> Relationship | None:
        """Return the relationship with ``relationship_id``, or None."""

    @abc.abstractmethod
    def list(self, layer_id: int | None = None) -> list[Relationship]:
        """Return relationships ordered by id, optionally for one layer only."""

    @abc.abstractmethod
    def referencing(self, object_id: int) -> list[Relationship]:
        """Return relationships having ``object_id`` as source or target."""

    @abc.abstractmethod
    def add(self, relationship: Relationship) -> Relationship:
        """Insert a relationship and return it with its assigned id."""

    @abc.abstractmethod
    def update(self, relationship: Relationship) -> Relationship:
        """Overwrite the stored relationship with the same id and return it."""

    @abc.abstractmethod
    def delete(self, relationship_ids: Iterable[int]) -> None:
        """Delete relationships by id; unknown ids are ignored."""

    @abc.abstractmethod
    def delete_for_layer(self, layer_id: int) -> int:
        """Delete every relationship declared in a layer; return the count."""
