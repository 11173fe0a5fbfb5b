"""Database engine factory.

Every Engine in DATAMODELER comes from `make_engine` so that connections are
configured consistently. On SQLite each new DBAPI connection gets PRAGMAs that
turn on foreign key enforcement (off by default in SQLite, and the cascade
rules of the modeling tables depend on it), WAL journaling and in-memory temp
storage.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event

from .dialects import DialectName

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import URL, Engine

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON;",
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA temp_store=MEMORY;",
)


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string is a SQLite URL."""
    return DialectName.from_url(url) is DialectName.SQLITE


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.

    Raises:
        UnsupportedDialect: The URL names neither PostgreSQL nor SQLite.
    """

    dialect = DialectName.from_url(url)
    engine = create_engine(url, echo=echo)

    if dialect is DialectName.SQLITE:

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            for pragma in SQLITE_PRAGMAS:
                cur.execute(pragma)
            cur.close()

    return engine
