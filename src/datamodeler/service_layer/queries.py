"""Read-side queries.

Queries open a unit of work, read, and leave without committing.
"""

from __future__ import annotations

from dataclasses import dataclass

from datamodeler.domain.business_domains import DataArea, Domain
from datamodeler.domain.errors import NotFoundError
from datamodeler.domain.model_graph import DataModel, Layer, ModelObject, Relationship
from datamodeler.domain.systems import System, SystemFormValues, to_form_values
from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork


@dataclass(frozen=True, slots=True)
class LayerGraph:
    """A layer with its objects and relationships."""

    layer: Layer
    objects: tuple[ModelObject, ...]
    relationships: tuple[Relationship, ...]


def load_system_form(system_id: int, uow: AbstractUnitOfWork) -> SystemFormValues:
    """Load a stored system as editable form values.

    Raises:
        NotFoundError: If there is no such system.
    """
    with uow:
        if (system := uow.systems.get(system_id)) is None:
            raise NotFoundError("system", system_id)
    return to_form_values(system)


def list_systems(uow: AbstractUnitOfWork) -> list[System]:
    with uow:
        return uow.systems.list()


def list_domains(uow: AbstractUnitOfWork) -> list[Domain]:
    with uow:
        return uow.domains.list_domains()


def list_data_areas(
    uow: AbstractUnitOfWork, domain_id: int | None = None
) -> list[DataArea]:
    with uow:
        return uow.domains.list_data_areas(domain_id)


def list_data_models(uow: AbstractUnitOfWork) -> list[tuple[DataModel, list[Layer]]]:
    """Every data model with its layers."""
    with uow:
        return [(model, uow.layers.list(model.id)) for model in uow.data_models.list()]


def load_layer_graph(layer_id: int, uow: AbstractUnitOfWork) -> LayerGraph:
    """Load a layer with its objects and relationships.

    Raises:
        NotFoundError: If there is no such layer.
    """
    with uow:
        if (layer := uow.layers.get(layer_id)) is None:
            raise NotFoundError("layer", layer_id)
        return LayerGraph(
            layer=layer,
            objects=tuple(uow.objects.list(layer_id)),
            relationships=tuple(uow.relationships.list(layer_id)),
        )
