"""Module defining Commands."""

from dataclasses import dataclass, field

from datamodeler.domain.model_graph import (
    DeletePolicy,
    LayerKind,
    Position,
    RelationshipLevel,
    RelationshipType,
)
from datamodeler.domain.systems import SystemFormValues

from .unsettable import UNSET, Unsettable

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


# --- systems, domains, data areas ---


@dataclass(frozen=True)
class SaveSystem(Command):
    """Create a system (``values.id`` is None) or update an existing one."""

    values: SystemFormValues


@dataclass(frozen=True)
class DeleteSystem(Command):
    """Delete a system."""

    system_id: int


@dataclass(frozen=True)
class CreateDomain(Command):
    """Create a business domain."""

    name: str
    description: str | None = None
    color_code: str | None = None


@dataclass(frozen=True)
class CreateDataArea(Command):
    """Create a data area inside a domain."""

    domain_id: int
    name: str
    description: str | None = None
    color_code: str | None = None


# --- data models & layers ---


@dataclass(frozen=True)
class CreateDataModel(Command):
    """Create a data model together with one layer per requested kind."""

    name: str
    description: str | None = None
    target_system_id: int | None = None
    domain_id: int | None = None
    data_area_id: int | None = None
    layers: tuple[LayerKind, ...] = field(default_factory=lambda: tuple(LayerKind))


@dataclass(frozen=True)
class DeleteDataModel(Command):
    """Delete a data model with its layers, objects and relationships."""

    data_model_id: int


@dataclass(frozen=True)
class DeleteLayer(Command):
    """Delete a layer with its objects and relationships."""

    layer_id: int


# --- objects ---


@dataclass(frozen=True)
class CreateObject(Command):
    """Place a new object in a layer."""

    layer_id: int
    name: str
    object_type: str | None = None
    description: str | None = None
    position: Position | None = None
    target_system_id: int | None = None
    is_visible: bool = True


@dataclass(frozen=True)
class UpdateObject(Command):
    """Change fields of an object. Changing ``layer_id`` moves it."""

    object_id: int
    layer_id: Unsettable[int] = UNSET
    name: Unsettable[str] = UNSET
    object_type: Unsettable[str] = UNSET
    description: Unsettable[str] = UNSET
    position: Unsettable[Position] = UNSET
    target_system_id: Unsettable[int] = UNSET
    is_visible: Unsettable[bool] = UNSET


@dataclass(frozen=True)
class DeleteObject(Command):
    """Delete an object; ``policy`` decides what happens to its relationships."""

    object_id: int
    policy: DeletePolicy | str = DeletePolicy.RESTRICT


# --- relationships ---


@dataclass(frozen=True)
class CreateRelationship(Command):
    """Connect two objects of a layer."""

    layer_id: int
    source_object_id: int
    target_object_id: int
    type: RelationshipType | str
    relationship_level: RelationshipLevel = RelationshipLevel.OBJECT
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class UpdateRelationship(Command):
    """Change fields of a relationship, endpoints and layer included."""

    relationship_id: int
    layer_id: Unsettable[int] = UNSET
    source_object_id: Unsettable[int] = UNSET
    target_object_id: Unsettable[int] = UNSET
    type: Unsettable[RelationshipType | str] = UNSET
    relationship_level: Unsettable[RelationshipLevel] = UNSET
    name: Unsettable[str] = UNSET
    description: Unsettable[str] = UNSET


@dataclass(frozen=True)
class DeleteRelationship(Command):
    """Delete a relationship."""

    relationship_id: int
