"""Systems and the mapping between stored records and editable form values.

A system's domain and data-area associations are stored inside its
configuration blob (``domainId``, ``domainIds``, ``dataAreaIds``) and are
mirrored as top-level form fields. Both locations are read and written only
through `read_associations` / `write_associations`, so the rest of the code
deals with a single normalized `SystemAssociations` value.

Nothing in this module raises: missing or malformed input degrades to
defaults, since form loading must never fail.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .connections import SystemType, merge_connection_defaults
from .identifiers import Id, coerce_numeric_id, normalize_ids

__all__ = [
    "DEFAULT_COLOR_CODE",
    "DEFAULT_STATUS",
    "DEFAULT_SYSTEM_TYPE",
    "System",
    "SystemAssociations",
    "SystemFormValues",
    "SystemRequestBody",
    "read_associations",
    "to_form_values",
    "to_request_body",
    "write_associations",
]

DEFAULT_COLOR_CODE = "#6366f1"
DEFAULT_STATUS = "disconnected"
DEFAULT_SYSTEM_TYPE = SystemType.SQL.value

# configuration keys holding the associations
DOMAIN_ID_KEY = "domainId"
DOMAIN_IDS_KEY = "domainIds"
DATA_AREA_IDS_KEY = "dataAreaIds"
TYPE_KEY = "type"

# pylint: disable=too-many-instance-attributes


# --- Associations ---


@dataclass(frozen=True, slots=True)
class SystemAssociations:
    """Normalized domain / data-area associations of a system.

    ``domain_id`` is the primary domain: the first of ``domain_ids`` unless a
    caller supplied it explicitly, or a legacy single-valued id when no list
    is stored.
    """

    domain_ids: tuple[Id, ...] = ()
    data_area_ids: tuple[Id, ...] = ()
    domain_id: Id | None = None


def read_associations(configuration: object) -> SystemAssociations:
    """Read associations out of a stored configuration blob.

    ``domainIds`` and ``dataAreaIds`` go through `normalize_ids`. When no
    domain id survives, a numeric legacy ``domainId`` is used as the primary
    domain (older records only stored that one key).
    """
    if not isinstance(configuration, Mapping):
        return SystemAssociations()

    domain_ids = tuple(normalize_ids(configuration.get(DOMAIN_IDS_KEY)))
    data_area_ids = tuple(normalize_ids(configuration.get(DATA_AREA_IDS_KEY)))

    if domain_ids:
        primary: Id | None = domain_ids[0]
    else:
        primary = _legacy_domain_id(configuration.get(DOMAIN_ID_KEY))
    return SystemAssociations(domain_ids, data_area_ids, primary)


def write_associations(
    configuration: Mapping[str, Any] | None, associations: SystemAssociations
) -> dict[str, Any]:
    """Return a copy of ``configuration`` with the associations embedded.

    An absent primary domain removes the ``domainId`` key.
    """
    result = dict(configuration or {})
    result[DOMAIN_IDS_KEY] = list(associations.domain_ids)
    result[DATA_AREA_IDS_KEY] = list(associations.data_area_ids)
    if associations.domain_id is None:
        result.pop(DOMAIN_ID_KEY, None)
    else:
        result[DOMAIN_ID_KEY] = associations.domain_id
    return result


def _legacy_domain_id(value: object) -> Id | None:
    # only a real number counts; strings were never written to this key
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return coerce_numeric_id(value)


# --- Records ---


@dataclass(frozen=True, slots=True)
class System:
    """A stored data source / target definition.

    Optional attributes are None when the stored row has no value; the form
    mapper supplies the defaults.
    """

    id: int | None
    name: str | None = None
    category: str | None = None
    type: str | None = None
    description: str | None = None
    connection_string: str | None = None
    configuration: Mapping[str, Any] | None = None
    status: str | None = DEFAULT_STATUS
    can_be_source: bool | None = None
    can_be_target: bool | None = None
    color_code: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def associations(self) -> SystemAssociations:
        """The normalized associations held by the configuration."""
        return read_associations(self.configuration)


@dataclass(slots=True)
class SystemFormValues:
    """Editable values backing the system form.

    The associations appear twice: as the top-level ``domain_ids``,
    ``data_area_ids`` and ``domain_id`` fields and inside ``configuration``.
    """

    name: str
    category: str
    type: str
    description: str = ""
    connection_string: str = ""
    configuration: dict[str, Any] = field(default_factory=dict)
    can_be_source: bool | None = True
    can_be_target: bool | None = True
    color_code: str = DEFAULT_COLOR_CODE
    domain_ids: list[Id] | None = None
    data_area_ids: list[Id] | None = None
    domain_id: Id | None = None
    id: int | None = None


@dataclass(frozen=True, slots=True)
class SystemRequestBody:
    """Payload sent to the persistence boundary when a system is saved."""

    name: str
    category: str
    type: str
    description: str
    connection_string: str
    configuration: dict[str, Any]
    can_be_source: bool
    can_be_target: bool
    color_code: str

    @property
    def associations(self) -> SystemAssociations:
        """The normalized associations embedded in the configuration."""
        return read_associations(self.configuration)

    def to_json(self) -> dict[str, Any]:
        """Render the body with the HTTP API's field names."""
        return {
            "name": self.name,
            "category": self.category,
            "type": self.type,
            "description": self.description,
            "connectionString": self.connection_string,
            "configuration": dict(self.configuration),
            "canBeSource": self.can_be_source,
            "canBeTarget": self.can_be_target,
            "colorCode": self.color_code,
        }


# --- Mapping ---


def to_form_values(system: System) -> SystemFormValues:
    """Map a stored system onto fully-populated form values.

    Every optional field receives an explicit default and the configuration is
    completed with the defaults of the system's type. The resolved
    associations and type are written into the configuration as well as the
    top-level fields.
    """
    system_type = system.type or DEFAULT_SYSTEM_TYPE
    associations = system.associations
    stored = system.configuration if isinstance(system.configuration, Mapping) else {}

    configuration = merge_connection_defaults(
        system_type,
        {
            **stored,
            DOMAIN_ID_KEY: associations.domain_id,
            DOMAIN_IDS_KEY: list(associations.domain_ids),
            DATA_AREA_IDS_KEY: list(associations.data_area_ids),
            TYPE_KEY: system_type,
        },
    )

    return SystemFormValues(
        id=system.id,
        name=system.name or "",
        category=system.category or "",
        type=system_type,
        description=system.description or "",
        connection_string=system.connection_string or "",
        configuration=configuration,
        can_be_source=_flag(system.can_be_source),
        can_be_target=_flag(system.can_be_target),
        color_code=system.color_code or DEFAULT_COLOR_CODE,
        domain_ids=list(associations.domain_ids),
        data_area_ids=list(associations.data_area_ids),
        domain_id=associations.domain_id,
    )


def to_request_body(values: SystemFormValues) -> SystemRequestBody:
    """Build the persistence payload from form values.

    ``domain_ids`` falls back to a singleton of ``domain_id``; the primary
    domain falls back to the first of ``domain_ids``. The configuration
    always carries the current ``type``. Capability flags left unset mean the
    system can act as both source and target.
    """
    explicit_domain_id = coerce_numeric_id(values.domain_id)
    domain_ids = _ids_or_default(
        values.domain_ids,
        [] if explicit_domain_id is None else [explicit_domain_id],
    )
    data_area_ids = _ids_or_default(values.data_area_ids, [])
    if explicit_domain_id is not None:
        domain_id: Id | None = explicit_domain_id
    else:
        domain_id = domain_ids[0] if domain_ids else None

    merged = merge_connection_defaults(values.type, values.configuration)
    # the embedded type follows the system type after a type change
    merged[TYPE_KEY] = values.type
    configuration = write_associations(
        merged,
        SystemAssociations(tuple(domain_ids), tuple(data_area_ids), domain_id),
    )

    return SystemRequestBody(
        name=values.name,
        category=values.category,
        type=values.type,
        description=values.description,
        connection_string=values.connection_string,
        configuration=configuration,
        can_be_source=_flag(values.can_be_source),
        can_be_target=_flag(values.can_be_target),
        color_code=values.color_code or DEFAULT_COLOR_CODE,
    )


def _flag(value: bool | None) -> bool:
    return True if value is None else bool(value)


def _ids_or_default(value: Sequence[Id] | None, default: list[Id]) -> list[Id]:
    return default if value is None else normalize_ids(value)
