"""Integrity checks run by the write handlers.

Each function reads what it needs through the unit of work it is given, so
the check and the following write happen in the same transaction. Object
rows are read with ``lock=True`` to keep a concurrent delete or move from
slipping in between the check and the write.
"""

from __future__ import annotations

from datamodeler.domain.errors import NotFoundError
from datamodeler.domain.model_graph import (
    DeletePolicy,
    Layer,
    ModelObject,
    Relationship,
    check_object_move,
    check_relationship,
    relationships_to_cascade,
)
from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork


def require_layer(uow: AbstractUnitOfWork, layer_id: int) -> Layer:
    """Return the layer or raise `NotFoundError`."""
    if (layer := uow.layers.get(layer_id)) is None:
        raise NotFoundError("layer", layer_id)
    return layer


def require_object(
    uow: AbstractUnitOfWork, object_id: int, *, lock: bool = True
) -> ModelObject:
    """Return the object (locked by default) or raise `NotFoundError`."""
    if (obj := uow.objects.get(object_id, lock=lock)) is None:
        raise NotFoundError("object", object_id)
    return obj


def verify_relationship(uow: AbstractUnitOfWork, relationship: Relationship) -> None:
    """Check a relationship about to be inserted or updated.

    Raises:
        NotFoundError: The declared layer does not exist.
        MissingEndpointError: An endpoint object does not exist.
        CrossLayerReferenceError: An endpoint lives in another layer.
    """
    require_layer(uow, relationship.model_id)
    endpoints = uow.objects.get_many(relationship.endpoint_ids, lock=True)
    check_relationship(relationship, endpoints)


def verify_object_move(
    uow: AbstractUnitOfWork, obj: ModelObject, new_layer_id: int
) -> None:
    """Check that ``obj`` may move to ``new_layer_id``.

    Raises:
        NotFoundError: The target layer does not exist.
        CrossLayerReferenceError: The object is referenced by a relationship.
    """
    if new_layer_id == obj.model_id:
        return
    require_layer(uow, new_layer_id)
    check_object_move(obj, new_layer_id, uow.relationships.referencing(obj.id))


def plan_object_delete(
    uow: AbstractUnitOfWork, obj: ModelObject, policy: DeletePolicy
) -> list[int]:
    """Return the relationship ids to delete along with ``obj``.

    Raises:
        DanglingRelationshipError: Under RESTRICT, when ``obj`` is referenced.
    """
    return relationships_to_cascade(
        obj.id, uow.relationships.referencing(obj.id), policy
    )
