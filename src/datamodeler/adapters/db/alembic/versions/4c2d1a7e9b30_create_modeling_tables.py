"""create modeling tables

Revision ID: 4c2d1a7e9b30
Revises:
Create Date: 2026-09-21 14:03:11.402815

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from datamodeler.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "4c2d1a7e9b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id() -> sa.Column:
    return sa.Column("id", BIGINT_PK, sa.Identity(start=1), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            UTCDateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            UTCDateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "systems",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "category",
            sa.String(length=100),
            nullable=False,
            comment='System category such as "ERP", "CRM" or "Data Lake".',
        ),
        sa.Column(
            "type",
            sa.String(length=50),
            nullable=False,
            comment='Connection type: "sql", "file", "adls", "api", ...',
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("connection_string", sa.Text(), nullable=True),
        sa.Column(
            "configuration",
            PORTABLE_JSON,
            nullable=True,
            comment="Connection settings plus domainIds/dataAreaIds associations.",
        ),
        sa.Column(
            "status",
            sa.String(length=30),
            server_default="disconnected",
            nullable=True,
            comment='"connected", "disconnected" or "error".',
        ),
        sa.Column(
            "color_code", sa.String(length=20), server_default="#6366f1", nullable=True
        ),
        sa.Column("can_be_source", sa.Boolean(), server_default=sa.true(), nullable=True),
        sa.Column("can_be_target", sa.Boolean(), server_default=sa.true(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_systems")),
        sa.UniqueConstraint("name", name=op.f("uq_systems_name")),
        comment="Systems that data models read from or write to.",
    )

    op.create_table(
        "data_domains",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "color_code", sa.String(length=20), server_default="#3b82f6", nullable=True
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_data_domains")),
        sa.UniqueConstraint("name", name=op.f("uq_data_domains_name")),
        comment="Business domains.",
    )

    op.create_table(
        "data_areas",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("domain_id", BIGINT_PK, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "color_code", sa.String(length=20), server_default="#10b981", nullable=True
        ),
        sa.ForeignKeyConstraint(
            ["domain_id"],
            ["data_domains.id"],
            name=op.f("fk_data_areas_domain_id_data_domains"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_data_areas")),
        comment="Sub-areas of a business domain.",
    )
    op.create_index(
        op.f("ix_data_areas_data_areas_domain_id"), "data_areas", ["domain_id"]
    )

    op.create_table(
        "data_models",
        _id(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("target_system_id", BIGINT_PK, nullable=True),
        sa.Column("domain_id", BIGINT_PK, nullable=True),
        sa.Column("data_area_id", BIGINT_PK, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["target_system_id"],
            ["systems.id"],
            name=op.f("fk_data_models_target_system_id_systems"),
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["domain_id"],
            ["data_domains.id"],
            name=op.f("fk_data_models_domain_id_data_domains"),
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["data_area_id"],
            ["data_areas.id"],
            name=op.f("fk_data_models_data_area_id_data_areas"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_data_models")),
        comment="Data models. Each owns one layer per layer kind.",
    )

    op.create_table(
        "data_model_layers",
        _id(),
        sa.Column("data_model_id", BIGINT_PK, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column(
            "layer",
            sa.String(length=20),
            nullable=False,
            comment='"flow", "conceptual", "logical" or "physical".',
        ),
        sa.Column("target_system_id", BIGINT_PK, nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "layer IN ('flow', 'conceptual', 'logical', 'physical')",
            name=op.f("ck_data_model_layers_layer_kind"),
        ),
        sa.ForeignKeyConstraint(
            ["data_model_id"],
            ["data_models.id"],
            name=op.f("fk_data_model_layers_data_model_id_data_models"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_system_id"],
            ["systems.id"],
            name=op.f("fk_data_model_layers_target_system_id_systems"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_data_model_layers")),
        sa.UniqueConstraint(
            "data_model_id",
            "layer",
            name=op.f("uq_data_model_layers_data_model_id_layer"),
        ),
        comment="Layers of a data model. Objects and relationships belong to one.",
    )

    op.create_table(
        "data_model_objects",
        _id(),
        sa.Column(
            "model_id",
            BIGINT_PK,
            nullable=False,
            comment="Layer the object lives in.",
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("object_type", sa.String(length=50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "position",
            PORTABLE_JSON,
            nullable=True,
            comment='Canvas position {"x": ..., "y": ...}.',
        ),
        sa.Column("target_system_id", BIGINT_PK, nullable=True),
        sa.Column("is_visible", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["model_id"],
            ["data_model_layers.id"],
            name=op.f("fk_data_model_objects_model_id_data_model_layers"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_system_id"],
            ["systems.id"],
            name=op.f("fk_data_model_objects_target_system_id_systems"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_data_model_objects")),
        comment="Objects (tables, entities, ...) placed in a layer.",
    )
    op.create_index(
        op.f("ix_data_model_objects_data_model_objects_model_id"),
        "data_model_objects",
        ["model_id"],
    )

    op.create_table(
        "data_model_object_relationships",
        _id(),
        sa.Column(
            "model_id",
            BIGINT_PK,
            nullable=False,
            comment="Layer the relationship is declared in.",
        ),
        sa.Column("source_model_object_id", BIGINT_PK, nullable=False),
        sa.Column("target_model_object_id", BIGINT_PK, nullable=False),
        sa.Column(
            "type",
            sa.String(length=10),
            nullable=False,
            comment='Cardinality: "1:1", "1:N", "N:1", "N:M" or "M:N".',
        ),
        sa.Column(
            "relationship_level",
            sa.String(length=20),
            server_default="object",
            nullable=False,
        ),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["model_id"],
            ["data_model_layers.id"],
            name=op.f("fk_data_model_object_relationships_model_id_data_model_layers"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["source_model_object_id"],
            ["data_model_objects.id"],
            name=op.f(
                "fk_data_model_object_relationships_source_model_object_id_data_model_objects"
            ),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_model_object_id"],
            ["data_model_objects.id"],
            name=op.f(
                "fk_data_model_object_relationships_target_model_object_id_data_model_objects"
            ),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_data_model_object_relationships")),
        comment="Typed edges between two objects of the same layer.",
    )
    for column in ("model_id", "source_model_object_id", "target_model_object_id"):
        op.create_index(
            op.f(
                "ix_data_model_object_relationships_"
                f"data_model_object_relationships_{column}"
            ),
            "data_model_object_relationships",
            [column],
        )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("data_model_object_relationships")
    op.drop_table("data_model_objects")
    op.drop_table("data_model_layers")
    op.drop_table("data_models")
    op.drop_table("data_areas")
    op.drop_table("data_domains")
    op.drop_table("systems")
