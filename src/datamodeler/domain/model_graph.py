"""Layered model graph: data models, layers, objects and relationships.

A data model is split into layers (flow, conceptual, logical, physical). Each
object lives in exactly one layer and each relationship connects two objects
of the layer it is declared in. The `check_*` functions below state those
rules over plain values; the service layer runs them inside a transaction
against freshly-read rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from .errors import (
    CrossLayerReferenceError,
    DanglingRelationshipError,
    MissingEndpointError,
    ValidationError,
)

# pylint: disable=too-many-instance-attributes

_E = TypeVar("_E", bound=Enum)


def _parse_lower(cls: type[_E], value: object, field: str) -> _E:
    """Look up a lowercase-valued enum member, case-insensitively.

    Raises:
        ValidationError: If ``value`` names no member of ``cls``.
    """
    if isinstance(value, cls):
        return value
    try:
        return cls(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(member.value for member in cls)
        raise ValidationError(field, value, f"expected one of {allowed}") from e


class LayerKind(str, Enum):
    """The tiers every data model is split into, in creation order."""

    FLOW = "flow"
    CONCEPTUAL = "conceptual"
    LOGICAL = "logical"
    PHYSICAL = "physical"

    @classmethod
    def parse(cls, value: str | LayerKind) -> LayerKind:
        """Parse a layer kind such as ``"Logical"``."""
        return _parse_lower(cls, value, "layer kind")


class RelationshipType(str, Enum):
    """Cardinality of a relationship."""

    ONE_TO_ONE = "1:1"
    ONE_TO_MANY = "1:N"
    MANY_TO_ONE = "N:1"
    MANY_TO_MANY = "N:M"
    MANY_TO_MANY_ALT = "M:N"

    @classmethod
    def parse(cls, value: str | RelationshipType) -> RelationshipType:
        """Parse a cardinality string such as ``"1:n"``.

        Raises:
            ValidationError: If ``value`` is not a known cardinality.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as e:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(
                "relationship type", value, f"expected one of {allowed}"
            ) from e


class RelationshipLevel(str, Enum):
    """Whether a relationship links whole objects or individual attributes."""

    OBJECT = "object"
    ATTRIBUTE = "attribute"

    @classmethod
    def parse(cls, value: str | RelationshipLevel) -> RelationshipLevel:
        return _parse_lower(cls, value, "relationship level")


class DeletePolicy(str, Enum):
    """What deleting an object does to relationships that reference it."""

    RESTRICT = "restrict"
    CASCADE = "cascade"

    @classmethod
    def parse(cls, value: str | DeletePolicy) -> DeletePolicy:
        return _parse_lower(cls, value, "delete policy")


@dataclass(frozen=True, slots=True)
class Position:
    """Canvas coordinates of an object."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class DataModel:
    """A data model; owns one layer per `LayerKind`."""

    id: int | None
    name: str
    description: str | None = None
    target_system_id: int | None = None
    domain_id: int | None = None
    data_area_id: int | None = None


@dataclass(frozen=True, slots=True)
class Layer:
    """A named partition of a data model."""

    id: int | None
    data_model_id: int
    name: str
    layer: LayerKind
    target_system_id: int | None = None


@dataclass(frozen=True, slots=True)
class ModelObject:
    """A node of a layer's graph (a table, an entity, ...)."""

    id: int | None
    model_id: int
    name: str
    object_type: str | None = None
    description: str | None = None
    position: Position | None = None
    target_system_id: int | None = None
    is_visible: bool = True


@dataclass(frozen=True, slots=True)
class Relationship:
    """A directed, typed edge between two objects of one layer."""

    id: int | None
    model_id: int
    source_model_object_id: int
    target_model_object_id: int
    type: RelationshipType
    relationship_level: RelationshipLevel = RelationshipLevel.OBJECT
    name: str | None = None
    description: str | None = None

    @property
    def endpoint_ids(self) -> tuple[int, ...]:
        """Distinct endpoint object ids, source first."""
        return tuple(
            dict.fromkeys((self.source_model_object_id, self.target_model_object_id))
        )


# --- Rules ---


def check_relationship(
    relationship: Relationship, objects: Mapping[int, ModelObject]
) -> None:
    """Check a relationship against the objects its endpoints resolve to.

    Args:
        relationship: The relationship about to be written.
        objects: Existing objects keyed by id; must contain at least the
            endpoints that exist.

    Raises:
        MissingEndpointError: An endpoint id is not in ``objects``.
        CrossLayerReferenceError: An endpoint lives in another layer.
    """
    endpoints = relationship.endpoint_ids
    if missing := [oid for oid in endpoints if oid not in objects]:
        raise MissingEndpointError(relationship.id, missing)

    offending = {
        oid: objects[oid].model_id
        for oid in endpoints
        if objects[oid].model_id != relationship.model_id
    }
    if offending:
        raise CrossLayerReferenceError(
            relationship.id, relationship.model_id, offending
        )


def check_object_move(
    obj: ModelObject, new_model_id: int, referencing: Iterable[Relationship]
) -> None:
    """Check that an object may move to another layer.

    An object referenced by any relationship is pinned to its layer, since
    moving it would leave those relationships spanning two layers.

    Raises:
        CrossLayerReferenceError: For the first relationship that would break.
    """
    if new_model_id == obj.model_id:
        return
    for relationship in referencing:
        raise CrossLayerReferenceError(
            relationship.id, relationship.model_id, {obj.id: new_model_id}
        )


def relationships_to_cascade(
    object_id: int, referencing: Iterable[Relationship], policy: DeletePolicy | str
) -> list[int]:
    """Decide what happens to relationships when an object is deleted.

    Returns:
        Ids of the relationships to delete along with the object.

    Raises:
        DanglingRelationshipError: Under `DeletePolicy.RESTRICT` when any
            relationship references the object.
    """
    ids = sorted({r.id for r in referencing if r.id is not None})
    if ids and DeletePolicy.parse(policy) == DeletePolicy.RESTRICT:
        raise DanglingRelationshipError(object_id, ids)
    return ids
