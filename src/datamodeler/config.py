"""Where DATAMODELER reads its settings from.

Every setting comes from a ``DATAMODELER_*`` environment variable (the CLI
mirrors each one as an option); the names live here so the CLI, the Alembic
environment and the tests agree on them.
"""

import os
import sys
from importlib.resources import files
from pathlib import Path
from typing import TextIO

from alembic.config import Config
from platformdirs import user_log_dir

APP_NAME = "datamodeler"

DB_URL_ENV_VAR = "DATAMODELER_DB_URL"
LOG_PATH_ENV_VAR = "DATAMODELER_LOG_PATH"
LOGGER_LEVELS_ENV_VAR = "DATAMODELER_LOGGER_LEVELS"
FLIGHT_RECORDER_CAPACITY_ENV_VAR = "DATAMODELER_FLIGHT_RECORDER_CAPACITY"
FORCE_FLUSH_ENV_VAR = "DATAMODELER_FORCE_FLUSH_FLIGHT_RECORDER"

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate
MIGRATIONS_PACKAGE = "datamodeler.adapters.db.alembic"


class DatabaseUrlNotSetError(Exception):
    """Raised when no database URL is configured."""

    def __init__(self) -> None:
        super().__init__(f"{DB_URL_ENV_VAR} is not set")


def get_db_url() -> str:
    """Return the database URL from ``DATAMODELER_DB_URL``.

    An empty value counts as unset.

    Raises:
        DatabaseUrlNotSetError: If the variable is unset or empty.
    """
    url = os.environ.get(DB_URL_ENV_VAR, "").strip()
    if not url:
        raise DatabaseUrlNotSetError
    return url


def default_log_path() -> Path:
    """Flight recorder file in the per-user log directory (created on demand)."""
    return Path(user_log_dir(APP_NAME, appauthor=False, ensure_exists=True)) / "latest.log"


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Programmatic Alembic config pointing at the packaged migrations.

    No ``alembic.ini`` is involved. ``db_url`` may be left out for commands
    that only read the scripts (``heads``, plain ``history``); ``stdout`` is
    where Alembic prints its status lines.
    """
    cfg = Config(stdout=stdout)
    cfg.set_main_option(ALEMBIC_SCRIPT_LOCATION_KEY, str(files(MIGRATIONS_PACKAGE)))
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    return cfg
