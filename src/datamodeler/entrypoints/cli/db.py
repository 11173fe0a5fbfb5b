"""DATAMODELER DB CLI: forward-only schema management.

``current``, ``heads`` and ``history`` wrap the Alembic commands of the same
name; ``upgrade`` migrates to head after a confirmation prompt (skipped with
``--force`` or ``--sql``); ``status`` checks connectivity, reports where the
schema stands and, once it is current, how many models the database holds.
There is no ``downgrade``: migrations only move forward.

Notices go to stderr, Alembic's own output to stdout.
"""

from __future__ import annotations

import sys
from enum import Enum
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, select

from datamodeler import config
from datamodeler.adapters.db import schema
from datamodeler.adapters.db.engine import make_engine

from .helpers import error, resolve_db_url, sanitize_url, success, warn

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy.engine import Connection

UPGRADE_SCHEMA_WARNING = (
    "This will upgrade the database schema to the latest version.\n"
    "Please ensure you have a backup before proceeding."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'datamodeler db upgrade' to update the schema."

_CONTENT_TABLES = (
    ("systems", schema.systems),
    ("data models", schema.data_models),
    ("layers", schema.data_model_layers),
    ("objects", schema.data_model_objects),
    ("relationships", schema.data_model_object_relationships),
)

_verbose = click.option(
    "--verbose", "-v", is_flag=True, help="Pass --verbose through to Alembic."
)


class MigrationStatus(Enum):
    """Where the database schema stands relative to the packaged migrations."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _alembic(*, connect: bool) -> Config:
    url = resolve_db_url() if connect else None
    return config.build_alembic_config(db_url=url, stdout=sys.stdout)


def _schema_state(conn: Connection, cfg: Config) -> tuple[str | None, MigrationStatus]:
    rev = MigrationContext.configure(conn).get_current_revision()
    head = ScriptDirectory.from_config(cfg).get_current_head()
    if rev is None:
        return None, MigrationStatus.UNINITIALIZED
    if rev == head:
        return rev, MigrationStatus.UP_TO_DATE
    return rev, MigrationStatus.OUT_OF_DATE


def _contents(conn: Connection) -> str:
    counts = (
        f"{conn.scalar(select(func.count()).select_from(table))} {label}"
        for label, table in _CONTENT_TABLES
    )
    return ", ".join(counts)


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands."""


@db.command()
@_verbose
def current(verbose: bool) -> None:
    """Show the revision the database is at."""
    command.current(_alembic(connect=True), verbose=verbose)


@db.command()
@_verbose
def heads(verbose: bool) -> None:
    """Show the head revision shipped with this release."""
    command.heads(_alembic(connect=False), verbose=verbose)


@db.command()
@_verbose
@click.option(
    "--indicate-current",
    "-i",
    is_flag=True,
    help="Mark the database's current revision (needs a connection).",
)
def history(verbose: bool, indicate_current: bool) -> None:
    """Show the migration history."""
    command.history(
        _alembic(connect=indicate_current),
        verbose=verbose,
        indicate_current=indicate_current,
    )


@db.command()
@click.option("--sql", is_flag=True, help="Print the migration SQL instead of running it.")
@click.option("--force", is_flag=True, help="Upgrade without confirmation.")
def upgrade(sql: bool, force: bool) -> None:
    """Upgrade the database to the head revision."""
    url = resolve_db_url()
    if not (force or sql):
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}")
        click.confirm("Are you sure you want to proceed?", abort=True)
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    command.upgrade(cfg, revision="head", sql=sql)
    success("Upgrade complete!")


@db.command()
def status() -> None:
    """Show database connectivity, schema state and contents."""
    try:
        url = resolve_db_url()
    except click.ClickException as e:
        error("Cannot connect to database")
        click.echo(e.format_message())
        return

    engine = make_engine(url)
    try:
        success("Database reachable")
        click.echo(f"Backend : {engine.dialect.name}")
        click.echo(f"URL     : {sanitize_url(url)}")
        with engine.connect() as conn:
            rev, state = _schema_state(conn, config.build_alembic_config(db_url=url))
            click.echo(f"Schema  : {f'{rev} ({state.value})' if rev else state.value}")
            if state is MigrationStatus.UP_TO_DATE:
                click.echo(f"Contents: {_contents(conn)}")
    finally:
        engine.dispose()

    if state is not MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
