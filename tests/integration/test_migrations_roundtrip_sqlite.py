"""Alembic round-trip smoke test for SQLite.

Runs *upgrade head → downgrade base* against a temporary, file-backed SQLite
database and checks that the modeling tables appear and disappear. A file
(not :memory:) keeps Alembic's schema changes across connections.
"""

from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect

from datamodeler import config
from datamodeler.adapters.db.metadata import metadata

# mypy: disable-error-code=no-untyped-def

MODELING_TABLES = {
    "systems",
    "data_domains",
    "data_areas",
    "data_models",
    "data_model_layers",
    "data_model_objects",
    "data_model_object_relationships",
}


def _tables(url: str) -> set[str]:
    engine = create_engine(url)
    try:
        return set(inspect(engine).get_table_names()) - {"alembic_version"}
    finally:
        engine.dispose()


def test_single_head():
    script = ScriptDirectory.from_config(config.build_alembic_config())
    assert script.get_heads() == ["4c2d1a7e9b30"]


def test_alembic_upgrade_downgrade_roundtrip_sqlite_tmp(tmp_path: Path):
    url = f"sqlite:///{tmp_path / 'datamodeler.db'}"

    command.upgrade(config.build_alembic_config(url), "head")
    assert _tables(url) == MODELING_TABLES

    command.downgrade(config.build_alembic_config(url), "base")
    assert _tables(url) == set()


def test_migrated_schema_matches_metadata(sqlite_engine_file):
    """Every column declared in the metadata exists after the migration."""
    inspector = inspect(sqlite_engine_file)
    for name, table in metadata.tables.items():
        if name not in MODELING_TABLES:
            continue
        reflected = {col["name"] for col in inspector.get_columns(name)}
        assert reflected == set(table.columns.keys()), name
