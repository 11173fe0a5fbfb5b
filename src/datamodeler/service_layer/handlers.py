"""Service layer handlers.

Every handler runs in exactly one unit of work and commits only after all of
its checks passed; an exception leaves the unit uncommitted, so it rolls back
on exit. Create handlers return the new entity's id.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from datamodeler.domain.business_domains import DataArea, Domain
from datamodeler.domain.errors import DuplicateNameError, NotFoundError, ValidationError
from datamodeler.domain.model_graph import (
    DataModel,
    DeletePolicy,
    Layer,
    LayerKind,
    ModelObject,
    Relationship,
    RelationshipLevel,
    RelationshipType,
)
from datamodeler.domain.systems import System, to_request_body
from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork

from . import commands
from .integrity import (
    plan_object_delete,
    require_layer,
    require_object,
    verify_object_move,
    verify_relationship,
)
from .unsettable import resolve

logger = logging.getLogger(__name__)


def _required_text(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field, value, "must not be blank")
    return str(value).strip()


# ============================================================================
#                       Systems, Domains & Data Areas
# ============================================================================


def save_system(cmd: commands.SaveSystem, uow: AbstractUnitOfWork) -> int:
    """Create or update a system from form values."""

    body = to_request_body(cmd.values)
    name = _required_text("name", body.name)
    category = _required_text("category", body.category)

    with uow:
        clash = uow.systems.get_by_name(name)
        if cmd.values.id is None:
            if clash is not None:
                raise DuplicateNameError("system", name)
            stored = uow.systems.add(
                System(
                    id=None,
                    name=name,
                    category=category,
                    type=body.type,
                    description=body.description,
                    connection_string=body.connection_string,
                    configuration=body.configuration,
                    can_be_source=body.can_be_source,
                    can_be_target=body.can_be_target,
                    color_code=body.color_code,
                )
            )
            logger.info("Created system %s (%s)", stored.id, name)
        else:
            if (current := uow.systems.get(cmd.values.id)) is None:
                raise NotFoundError("system", cmd.values.id)
            if clash is not None and clash.id != current.id:
                raise DuplicateNameError("system", name)
            stored = uow.systems.update(
                replace(
                    current,
                    name=name,
                    category=category,
                    type=body.type,
                    description=body.description,
                    connection_string=body.connection_string,
                    configuration=body.configuration,
                    can_be_source=body.can_be_source,
                    can_be_target=body.can_be_target,
                    color_code=body.color_code,
                )
            )
            logger.info("Updated system %s (%s)", stored.id, name)
        uow.commit()
    return stored.id


def delete_system(cmd: commands.DeleteSystem, uow: AbstractUnitOfWork) -> None:
    """Delete a system."""

    with uow:
        if uow.systems.get(cmd.system_id) is None:
            raise NotFoundError("system", cmd.system_id)
        uow.systems.delete(cmd.system_id)
        uow.commit()
    logger.info("Deleted system %s", cmd.system_id)


def create_domain(cmd: commands.CreateDomain, uow: AbstractUnitOfWork) -> int:
    """Create a business domain with a unique name."""

    name = _required_text("name", cmd.name)
    with uow:
        if uow.domains.get_domain_by_name(name) is not None:
            raise DuplicateNameError("domain", name)
        domain = Domain(id=None, name=name, description=cmd.description)
        if cmd.color_code:
            domain = replace(domain, color_code=cmd.color_code)
        stored = uow.domains.add_domain(domain)
        uow.commit()
    logger.info("Created domain %s (%s)", stored.id, name)
    return stored.id


def create_data_area(cmd: commands.CreateDataArea, uow: AbstractUnitOfWork) -> int:
    """Create a data area inside an existing domain."""

    name = _required_text("name", cmd.name)
    with uow:
        if uow.domains.get_domain(cmd.domain_id) is None:
            raise NotFoundError("domain", cmd.domain_id)
        area = DataArea(
            id=None, name=name, domain_id=cmd.domain_id, description=cmd.description
        )
        if cmd.color_code:
            area = replace(area, color_code=cmd.color_code)
        stored = uow.domains.add_data_area(area)
        uow.commit()
    logger.info("Created data area %s (%s) in domain %s", stored.id, name, cmd.domain_id)
    return stored.id


# ============================================================================
#                          Data Models & Layers
# ============================================================================


def create_data_model(cmd: commands.CreateDataModel, uow: AbstractUnitOfWork) -> int:
    """Create a data model and its layers."""

    name = _required_text("name", cmd.name)
    kinds = list(dict.fromkeys(LayerKind.parse(kind) for kind in cmd.layers))

    with uow:
        model = uow.data_models.add(
            DataModel(
                id=None,
                name=name,
                description=cmd.description,
                target_system_id=cmd.target_system_id,
                domain_id=cmd.domain_id,
                data_area_id=cmd.data_area_id,
            )
        )
        for kind in kinds:
            uow.layers.add(
                Layer(
                    id=None,
                    data_model_id=model.id,
                    name=f"{name} ({kind.value})",
                    layer=kind,
                    target_system_id=cmd.target_system_id,
                )
            )
        uow.commit()
    logger.info(
        "Created data model %s (%s) with layers %s",
        model.id,
        name,
        ", ".join(kind.value for kind in kinds),
    )
    return model.id


def _purge_layer(uow: AbstractUnitOfWork, layer_id: int) -> None:
    # relationships elsewhere that point into this layer go too
    for obj in uow.objects.list(layer_id):
        uow.relationships.delete(r.id for r in uow.relationships.referencing(obj.id))
    rels = uow.relationships.delete_for_layer(layer_id)
    objs = uow.objects.delete_for_layer(layer_id)
    uow.layers.delete(layer_id)
    logger.debug(
        "Purged layer %s: %d objects, %d relationships", layer_id, objs, rels
    )


def delete_layer(cmd: commands.DeleteLayer, uow: AbstractUnitOfWork) -> None:
    """Delete a layer with everything in it."""

    with uow:
        require_layer(uow, cmd.layer_id)
        _purge_layer(uow, cmd.layer_id)
        uow.commit()
    logger.info("Deleted layer %s", cmd.layer_id)


def delete_data_model(cmd: commands.DeleteDataModel, uow: AbstractUnitOfWork) -> None:
    """Delete a data model, its layers and everything in them."""

    with uow:
        if uow.data_models.get(cmd.data_model_id) is None:
            raise NotFoundError("data model", cmd.data_model_id)
        for layer in uow.layers.list(cmd.data_model_id):
            _purge_layer(uow, layer.id)
        uow.data_models.delete(cmd.data_model_id)
        uow.commit()
    logger.info("Deleted data model %s", cmd.data_model_id)


# ============================================================================
#                                 Objects
# ============================================================================


def create_object(cmd: commands.CreateObject, uow: AbstractUnitOfWork) -> int:
    """Place a new object in an existing layer."""

    name = _required_text("name", cmd.name)
    with uow:
        require_layer(uow, cmd.layer_id)
        obj = uow.objects.add(
            ModelObject(
                id=None,
                model_id=cmd.layer_id,
                name=name,
                object_type=cmd.object_type,
                description=cmd.description,
                position=cmd.position,
                target_system_id=cmd.target_system_id,
                is_visible=cmd.is_visible,
            )
        )
        uow.commit()
    logger.info("Created object %s (%s) in layer %s", obj.id, name, cmd.layer_id)
    return obj.id


def update_object(cmd: commands.UpdateObject, uow: AbstractUnitOfWork) -> None:
    """Update an object; moving a referenced object to another layer fails."""

    with uow:
        current = require_object(uow, cmd.object_id)
        updated = replace(
            current,
            model_id=resolve(cmd.layer_id, current.model_id, clearable=False, field="layer_id"),
            name=resolve(cmd.name, current.name, clearable=False, field="name"),
            object_type=resolve(
                cmd.object_type, current.object_type, clearable=True, field="object_type"
            ),
            description=resolve(
                cmd.description, current.description, clearable=True, field="description"
            ),
            position=resolve(cmd.position, current.position, clearable=True, field="position"),
            target_system_id=resolve(
                cmd.target_system_id,
                current.target_system_id,
                clearable=True,
                field="target_system_id",
            ),
            is_visible=resolve(
                cmd.is_visible, current.is_visible, clearable=False, field="is_visible"
            ),
        )
        if updated == current:
            logger.debug("UpdateObject %s: no changes; noop", cmd.object_id)
            return

        _required_text("name", updated.name)
        verify_object_move(uow, current, updated.model_id)
        uow.objects.update(updated)
        uow.commit()
    logger.info("Updated object %s", cmd.object_id)


def delete_object(cmd: commands.DeleteObject, uow: AbstractUnitOfWork) -> None:
    """Delete an object, honoring the requested delete policy."""

    policy = DeletePolicy.parse(cmd.policy)
    with uow:
        obj = require_object(uow, cmd.object_id)
        cascaded = plan_object_delete(uow, obj, policy)
        uow.relationships.delete(cascaded)
        uow.objects.delete(obj.id)
        uow.commit()
    logger.info(
        "Deleted object %s (policy=%s, cascaded relationships=%s)",
        cmd.object_id,
        policy.value,
        cascaded,
    )


# ============================================================================
#                              Relationships
# ============================================================================


def create_relationship(
    cmd: commands.CreateRelationship, uow: AbstractUnitOfWork
) -> int:
    """Create a relationship between two objects of one layer."""

    relationship = Relationship(
        id=None,
        model_id=cmd.layer_id,
        source_model_object_id=cmd.source_object_id,
        target_model_object_id=cmd.target_object_id,
        type=RelationshipType.parse(cmd.type),
        relationship_level=RelationshipLevel.parse(cmd.relationship_level),
        name=cmd.name,
        description=cmd.description,
    )

    with uow:
        verify_relationship(uow, relationship)
        stored = uow.relationships.add(relationship)
        uow.commit()
    logger.info(
        "Created relationship %s in layer %s: %s -> %s (%s)",
        stored.id,
        cmd.layer_id,
        cmd.source_object_id,
        cmd.target_object_id,
        stored.type.value,
    )
    return stored.id


def update_relationship(
    cmd: commands.UpdateRelationship, uow: AbstractUnitOfWork
) -> None:
    """Update a relationship; the result must satisfy the same rules as a new one."""

    with uow:
        if (current := uow.relationships.get(cmd.relationship_id)) is None:
            raise NotFoundError("relationship", cmd.relationship_id)

        rel_type = resolve(cmd.type, current.type, clearable=False, field="type")
        level = resolve(
            cmd.relationship_level,
            current.relationship_level,
            clearable=False,
            field="relationship_level",
        )
        updated = replace(
            current,
            model_id=resolve(cmd.layer_id, current.model_id, clearable=False, field="layer_id"),
            source_model_object_id=resolve(
                cmd.source_object_id,
                current.source_model_object_id,
                clearable=False,
                field="source_object_id",
            ),
            target_model_object_id=resolve(
                cmd.target_object_id,
                current.target_model_object_id,
                clearable=False,
                field="target_object_id",
            ),
            type=RelationshipType.parse(rel_type),
            relationship_level=RelationshipLevel.parse(level),
            name=resolve(cmd.name, current.name, clearable=True, field="name"),
            description=resolve(
                cmd.description, current.description, clearable=True, field="description"
            ),
        )
        if updated == current:
            logger.debug("UpdateRelationship %s: no changes; noop", cmd.relationship_id)
            return

        verify_relationship(uow, updated)
        uow.relationships.update(updated)
        uow.commit()
    logger.info("Updated relationship %s", cmd.relationship_id)


def delete_relationship(
    cmd: commands.DeleteRelationship, uow: AbstractUnitOfWork
) -> None:
    """Delete a relationship."""

    with uow:
        if uow.relationships.get(cmd.relationship_id) is None:
            raise NotFoundError("relationship", cmd.relationship_id)
        uow.relationships.delete([cmd.relationship_id])
        uow.commit()
    logger.info("Deleted relationship %s", cmd.relationship_id)


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.SaveSystem: save_system,
    commands.DeleteSystem: delete_system,
    commands.CreateDomain: create_domain,
    commands.CreateDataArea: create_data_area,
    commands.CreateDataModel: create_data_model,
    commands.DeleteDataModel: delete_data_model,
    commands.DeleteLayer: delete_layer,
    commands.CreateObject: create_object,
    commands.UpdateObject: update_object,
    commands.DeleteObject: delete_object,
    commands.CreateRelationship: create_relationship,
    commands.UpdateRelationship: update_relationship,
    commands.DeleteRelationship: delete_relationship,
}
