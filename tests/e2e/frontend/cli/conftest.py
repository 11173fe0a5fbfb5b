"""Fixtures for end-to-end CLI logging runs.

`emit-logs` is a throwaway subcommand attached to the ``datamodeler`` group
for the duration of a test. It writes one record per level on an application
logger and a few on a third-party logger, so console filtering and the flight
recorder can be observed from the outside.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from datamodeler.entrypoints.cli.main import datamodeler

# pylint: disable=redefined-outer-name

APP_LOGGER = "datamodeler.service_layer.handlers"
LIB_LOGGER = "vendor.driver"


@click.command("emit-logs")
def emit_logs():
    """Write sample records at every level."""
    app = logging.getLogger(APP_LOGGER)
    lib = logging.getLogger(LIB_LOGGER)
    app.debug("app debug record")
    app.info("app info record")
    lib.debug("lib debug record")
    lib.info("lib info record")
    app.warning("app warning record")
    app.error("app error record")
    app.critical("app critical record")
    app.debug("app trailing debug record")


@pytest.fixture
def cli(tmp_path, monkeypatch):
    """Invoke ``datamodeler ... emit-logs`` from inside ``tmp_path``.

    Returns a callable taking the global options (and optional env) and
    giving back the `click.testing.Result`.
    """
    monkeypatch.chdir(tmp_path)
    datamodeler.add_command(emit_logs)
    runner = CliRunner(env={"DATAMODELER_LOG_PATH": str(tmp_path / "latest.log")})

    def _invoke(*args: str, env: dict[str, str] | None = None):
        return runner.invoke(datamodeler, [*args, "emit-logs"], env=env)

    yield _invoke

    datamodeler.commands.pop("emit-logs", None)
    for section in getattr(datamodeler, "_sections", []):
        getattr(section, "commands", {}).pop("emit-logs", None)
    default = getattr(datamodeler, "_default_section", None)
    if default is not None:
        default.commands.pop("emit-logs", None)
