"""DATAMODELER systems CLI: connection types and stored systems."""

from __future__ import annotations

import json

import click
import click_extra as clickx
from rich.console import Console
from rich.table import Table

from datamodeler.bootstrap import bootstrap
from datamodeler.domain.connections import (
    CONNECTION_TYPE_OPTIONS,
    get_connection_template,
)
from datamodeler.domain.errors import NotFoundError
from datamodeler.domain.systems import to_request_body
from datamodeler.service_layer.queries import load_system_form

from .helpers import resolve_db_url


@click.group(cls=clickx.ExtraGroup)
def systems() -> None:
    """Systems and their connection settings."""


@systems.command()
@click.option("--json", "as_json", is_flag=True, help="Print the templates as JSON.")
def types(as_json: bool) -> None:
    """List connection types with their default settings."""
    templates = [get_connection_template(value) for value, _ in CONNECTION_TYPE_OPTIONS]

    if as_json:
        click.echo(
            json.dumps(
                {
                    t.system_type.value: {
                        "label": t.label,
                        "defaults": dict(t.defaults),
                        "fields": [f.key for f in t.fields],
                    }
                    for t in templates
                    if t is not None
                },
                indent=2,
            )
        )
        return

    table = Table(title="Connection types", title_justify="left")
    table.add_column("type")
    table.add_column("label")
    table.add_column("defaults")
    for t in templates:
        if t is None:
            continue
        defaults = ", ".join(
            f"{key}={value!r}" for key, value in t.defaults.items() if key != "type"
        )
        table.add_row(t.system_type.value, t.label, defaults or "-")
    Console().print(table)


@systems.command()
@click.argument("system_id", type=int)
def show(system_id: int) -> None:
    """Print a stored system as the JSON body an API client would send."""
    container = bootstrap(resolve_db_url())
    try:
        values = load_system_form(system_id, container.uow)
    except NotFoundError as e:
        raise click.ClickException(str(e)) from e
    click.echo(json.dumps(to_request_body(values).to_json(), indent=2, default=str))
