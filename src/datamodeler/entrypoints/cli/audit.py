"""DATAMODELER audit CLI: read-only integrity reports.

``orphans`` lists relationships with a missing endpoint or spanning two
layers and exits with status 1 when it finds any, so it can gate scripts.
``counts`` prints per-layer object and relationship totals. Both accept
``--json`` for machine-readable output on stdout.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from rich.console import Console
from rich.table import Table

from datamodeler.bootstrap import bootstrap

from .helpers import resolve_db_url, success, warn

if TYPE_CHECKING:
    from datamodeler.interfaces.audit import OrphanEntry, OrphanReport

_CATEGORIES = (
    ("missing_source", "Missing source object"),
    ("missing_target", "Missing target object"),
    ("cross_layer", "Endpoint in another layer"),
)


@click.group(cls=clickx.ExtraGroup)
def audit() -> None:
    """Integrity reports over layers, objects and relationships."""


def _orphan_table(title: str, entries: tuple[OrphanEntry, ...]) -> Table:
    table = Table(title=title, title_justify="left")
    for column in ("rel", "layer", "source", "target", "type"):
        table.add_column(column, justify="right" if column != "type" else "left")
    for entry in entries:
        source = str(entry.source_model_object_id)
        target = str(entry.target_model_object_id)
        if entry.source_layer_id is not None:
            source += f" (layer {entry.source_layer_id})"
            target += f" (layer {entry.target_layer_id})"
        table.add_row(
            str(entry.relationship_id),
            str(entry.layer_id),
            source,
            target,
            entry.relationship_type,
        )
    return table


def _report_json(report: OrphanReport) -> str:
    return json.dumps(
        {
            name: [asdict(entry) for entry in getattr(report, name)]
            for name, _ in _CATEGORIES
        },
        indent=2,
    )


@audit.command()
@click.option(
    "--layer",
    "layer_id",
    type=int,
    default=None,
    help="Only check relationships declared in this layer.",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=20,
    show_default=True,
    help="Maximum number of relationships listed per category.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def orphans(ctx: click.Context, layer_id: int | None, limit: int, as_json: bool) -> None:
    """List relationships that break the layer rules."""
    container = bootstrap(resolve_db_url())
    report = container.audit.find_orphans(layer_id=layer_id, limit=limit)

    if as_json:
        click.echo(_report_json(report))
    else:
        console = Console()
        for name, title in _CATEGORIES:
            if entries := getattr(report, name):
                console.print(_orphan_table(title, entries))

    if report.is_clean:
        success("No orphaned relationships.")
        return
    warn(f"{len(report.relationship_ids)} orphaned relationship(s) found.")
    ctx.exit(1)


@audit.command()
@click.option("--json", "as_json", is_flag=True, help="Print the counts as JSON.")
def counts(as_json: bool) -> None:
    """Show object and relationship totals per layer."""
    container = bootstrap(resolve_db_url())
    relationship_counts = container.audit.relationship_counts()
    object_counts = {c.layer_id: c for c in container.audit.object_counts()}

    if as_json:
        click.echo(
            json.dumps(
                {
                    "relationships": [asdict(c) for c in relationship_counts],
                    "objects": [asdict(c) for c in object_counts.values()],
                },
                indent=2,
            )
        )
        return

    table = Table(title="Per-layer totals", title_justify="left")
    table.add_column("layer", justify="right")
    table.add_column("name")
    table.add_column("kind")
    for column in ("objects", "relationships", "sources", "targets"):
        table.add_column(column, justify="right")
    for rel_count in relationship_counts:
        obj_count = object_counts.get(rel_count.layer_id)
        table.add_row(
            str(rel_count.layer_id),
            rel_count.layer_name,
            rel_count.layer_kind.value,
            str(obj_count.total_objects if obj_count else 0),
            str(rel_count.total_relationships),
            str(rel_count.unique_source_objects),
            str(rel_count.unique_target_objects),
        )
    Console().print(table)
