"""Relational schema of DATAMODELER.

Tables (parents first):

| Table                            | Holds                                      |
|----------------------------------|--------------------------------------------|
| systems                          | source/target systems and their config     |
| data_domains                     | business domains                           |
| data_areas                       | sub-areas of a domain                      |
| data_models                      | data models                                |
| data_model_layers                | one row per (data model, layer kind)       |
| data_model_objects               | objects placed in a layer                  |
| data_model_object_relationships  | typed edges between objects of one layer   |

Deleting a data model cascades to its layers, a layer to its objects and
relationships, and an object to the relationships that reference it. The
"both endpoints in the relationship's layer" rule cannot be written as a
foreign key; the service layer enforces it and `datamodeler audit` reports
rows that break it.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Identity,
    Index,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
    true,
)

from datamodeler.adapters.db.metadata import metadata
from datamodeler.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

__all__ = [
    "systems",
    "data_domains",
    "data_areas",
    "data_models",
    "data_model_layers",
    "data_model_objects",
    "data_model_object_relationships",
]


def _pk() -> Column:
    return Column(
        "id",
        BIGINT_PK,
        Identity(start=1),
        primary_key=True,
        nullable=False,
    )


def _timestamps() -> tuple[Column, Column]:
    return (
        Column(
            "created_at",
            UTCDateTime(),
            nullable=False,
            server_default=text("CURRENT_TIMESTAMP"),
        ),
        Column(
            "updated_at",
            UTCDateTime(),
            nullable=False,
            server_default=text("CURRENT_TIMESTAMP"),
        ),
    )


systems = Table(
    "systems",
    metadata,
    _pk(),
    Column("name", String(200), nullable=False, unique=True),
    Column(
        "category",
        String(100),
        nullable=False,
        comment='System category such as "ERP", "CRM" or "Data Lake".',
    ),
    Column(
        "type",
        String(50),
        nullable=False,
        comment='Connection type: "sql", "file", "adls", "api", ...',
    ),
    Column("description", Text, nullable=True),
    Column("connection_string", Text, nullable=True),
    Column(
        "configuration",
        PORTABLE_JSON,
        nullable=True,
        comment="Connection settings plus domainIds/dataAreaIds associations.",
    ),
    Column(
        "status",
        String(30),
        nullable=True,
        server_default="disconnected",
        comment='"connected", "disconnected" or "error".',
    ),
    Column("color_code", String(20), nullable=True, server_default="#6366f1"),
    Column("can_be_source", Boolean, nullable=True, server_default=true()),
    Column("can_be_target", Boolean, nullable=True, server_default=true()),
    *_timestamps(),
    comment="Systems that data models read from or write to.",
)

data_domains = Table(
    "data_domains",
    metadata,
    _pk(),
    Column("name", String(200), nullable=False, unique=True),
    Column("description", Text, nullable=True),
    Column("color_code", String(20), nullable=True, server_default="#3b82f6"),
    comment="Business domains.",
)

data_areas = Table(
    "data_areas",
    metadata,
    _pk(),
    Column("name", String(200), nullable=False),
    Column(
        "domain_id",
        BIGINT_PK,
        ForeignKey("data_domains.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("description", Text, nullable=True),
    Column("color_code", String(20), nullable=True, server_default="#10b981"),
    Index(None, "domain_id"),
    comment="Sub-areas of a business domain.",
)

data_models = Table(
    "data_models",
    metadata,
    _pk(),
    Column("name", String(200), nullable=False),
    Column("description", Text, nullable=True),
    Column(
        "target_system_id",
        BIGINT_PK,
        ForeignKey("systems.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "domain_id",
        BIGINT_PK,
        ForeignKey("data_domains.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "data_area_id",
        BIGINT_PK,
        ForeignKey("data_areas.id", ondelete="SET NULL"),
        nullable=True,
    ),
    *_timestamps(),
    comment="Data models. Each owns one layer per layer kind.",
)

data_model_layers = Table(
    "data_model_layers",
    metadata,
    _pk(),
    Column(
        "data_model_id",
        BIGINT_PK,
        ForeignKey("data_models.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String(200), nullable=False),
    Column(
        "layer",
        String(20),
        nullable=False,
        comment='"flow", "conceptual", "logical" or "physical".',
    ),
    Column(
        "target_system_id",
        BIGINT_PK,
        ForeignKey("systems.id", ondelete="SET NULL"),
        nullable=True,
    ),
    *_timestamps(),
    UniqueConstraint("data_model_id", "layer"),
    CheckConstraint(
        "layer IN ('flow', 'conceptual', 'logical', 'physical')", name="layer_kind"
    ),
    comment="Layers of a data model. Objects and relationships belong to one.",
)

data_model_objects = Table(
    "data_model_objects",
    metadata,
    _pk(),
    Column(
        "model_id",
        BIGINT_PK,
        ForeignKey("data_model_layers.id", ondelete="CASCADE"),
        nullable=False,
        comment="Layer the object lives in.",
    ),
    Column("name", String(200), nullable=False),
    Column("object_type", String(50), nullable=True),
    Column("description", Text, nullable=True),
    Column(
        "position",
        PORTABLE_JSON,
        nullable=True,
        comment='Canvas position {"x": ..., "y": ...}.',
    ),
    Column(
        "target_system_id",
        BIGINT_PK,
        ForeignKey("systems.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("is_visible", Boolean, nullable=False, server_default=true()),
    *_timestamps(),
    Index(None, "model_id"),
    comment="Objects (tables, entities, ...) placed in a layer.",
)

data_model_object_relationships = Table(
    "data_model_object_relationships",
    metadata,
    _pk(),
    Column(
        "model_id",
        BIGINT_PK,
        ForeignKey("data_model_layers.id", ondelete="CASCADE"),
        nullable=False,
        comment="Layer the relationship is declared in.",
    ),
    Column(
        "source_model_object_id",
        BIGINT_PK,
        ForeignKey("data_model_objects.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "target_model_object_id",
        BIGINT_PK,
        ForeignKey("data_model_objects.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "type",
        String(10),
        nullable=False,
        comment='Cardinality: "1:1", "1:N", "N:1", "N:M" or "M:N".',
    ),
    Column(
        "relationship_level",
        String(20),
        nullable=False,
        server_default="object",
    ),
    Column("name", String(200), nullable=True),
    Column("description", Text, nullable=True),
    *_timestamps(),
    Index(None, "model_id"),
    Index(None, "source_model_object_id"),
    Index(None, "target_model_object_id"),
    comment="Typed edges between two objects of the same layer.",
)
