"""Domain-layer error definitions."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

# ============================================================================
#                           General domain errors
# ============================================================================


class DataModelerError(Exception):
    """Base class for domain-layer errors."""


class ValidationError(DataModelerError):
    """Raised when command input is malformed (e.g. an unknown enum value)."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid {field} {value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class NotFoundError(DataModelerError):
    """Raised when a requested entity id does not exist."""

    def __init__(self, kind: str, entity_id: int) -> None:
        super().__init__(f"{kind} ({entity_id}) not found")
        self.kind = kind
        self.entity_id = entity_id


class DuplicateNameError(DataModelerError):
    """Raised when a uniquely-named entity would get a name already in use."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} named {name!r} already exists")
        self.kind = kind
        self.name = name


# ============================================================================
#                   Layered model graph integrity errors
# ============================================================================


class IntegrityRule(str, Enum):
    """The integrity rules of the layered model graph."""

    MISSING_ENDPOINT = "MissingEndpoint"
    CROSS_LAYER_REFERENCE = "CrossLayerReference"
    DANGLING_RELATIONSHIP = "DanglingRelationship"


class IntegrityError(DataModelerError):
    """Raised by the persistence boundary when a write would break the graph.

    Attributes:
        rule: The violated rule.
    """

    def __init__(self, rule: IntegrityRule, message: str) -> None:
        super().__init__(f"{rule.value}: {message}")
        self.rule = rule


class MissingEndpointError(IntegrityError):
    """A relationship endpoint does not resolve to an existing object.

    Attributes:
        relationship_id: Id of the relationship being written (None on create).
        missing_ids: Endpoint object ids that do not exist.
    """

    def __init__(self, relationship_id: int | None, missing_ids: Iterable[int]) -> None:
        self.relationship_id = relationship_id
        self.missing_ids = tuple(missing_ids)
        ids = ", ".join(str(i) for i in self.missing_ids)
        super().__init__(
            IntegrityRule.MISSING_ENDPOINT,
            f"relationship {_describe(relationship_id)} references "
            f"non-existent object(s) {ids}",
        )


class CrossLayerReferenceError(IntegrityError):
    """An object and a relationship touching it would live in different layers.

    Attributes:
        relationship_id: Id of the relationship being written (None on create).
        layer_id: The layer the relationship is declared in.
        offending: Mapping of object id to the layer that object belongs to.
    """

    def __init__(
        self, relationship_id: int | None, layer_id: int, offending: dict[int, int]
    ) -> None:
        self.relationship_id = relationship_id
        self.layer_id = layer_id
        self.offending = dict(offending)
        detail = ", ".join(
            f"object {obj} in layer {layer}" for obj, layer in self.offending.items()
        )
        super().__init__(
            IntegrityRule.CROSS_LAYER_REFERENCE,
            f"relationship {_describe(relationship_id)} in layer {layer_id} "
            f"spans {detail}",
        )


class DanglingRelationshipError(IntegrityError):
    """An object cannot be deleted while relationships still reference it.

    Attributes:
        object_id: The object that was to be deleted.
        relationship_ids: Relationships referencing it.
    """

    def __init__(self, object_id: int, relationship_ids: Iterable[int]) -> None:
        self.object_id = object_id
        self.relationship_ids = tuple(relationship_ids)
        ids = ", ".join(str(i) for i in self.relationship_ids)
        super().__init__(
            IntegrityRule.DANGLING_RELATIONSHIP,
            f"object {object_id} is still referenced by relationship(s) {ids}",
        )


def _describe(relationship_id: int | None) -> str:
    return "<new>" if relationship_id is None else str(relationship_id)
