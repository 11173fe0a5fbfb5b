"""Unit tests for the custom column types in `datamodeler.adapters.db.sa_types`.

Nothing here touches a database: the types are exercised through their
bind/result hooks and through statement compilation against each dialect.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import dialect as PostgresDialect
from sqlalchemy.dialects.sqlite import dialect as SQLiteDialect

from datamodeler.adapters.db.dialects import DialectName
from datamodeler.adapters.db.sa_types import BIGINT_PK, PORTABLE_JSON, UTCDateTime

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

DIALECTS = pytest.mark.parametrize(
    "dialect", [SQLiteDialect(), PostgresDialect()], ids=["sqlite", "postgres"]
)
NOON_UTC = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _compile_type(type_: sa.types.TypeEngine, dialect: Dialect) -> str:
    return type_.compile(dialect=dialect)


# --- UTCDateTime ---


def test_python_type_is_datetime():
    assert UTCDateTime().python_type is datetime


@DIALECTS
def test_bind_none_passes_through(dialect: Dialect):
    assert UTCDateTime().process_bind_param(None, dialect) is None


@DIALECTS
@pytest.mark.parametrize(
    "value",
    [
        datetime(2024, 1, 1, 12, 0, 0),
        datetime(2024, 1, 1, 5, 0, 0, tzinfo=timezone(timedelta(hours=-7))),
    ],
    ids=["naive", "aware"],
)
def test_bind_normalizes_to_utc(dialect: Dialect, value: datetime):
    """SQLite binds naive UTC wall time; PostgreSQL binds an aware UTC value."""
    out = UTCDateTime().process_bind_param(value, dialect)
    if dialect.name == DialectName.SQLITE.value:
        assert out.tzinfo is None
        assert out == NOON_UTC.replace(tzinfo=None)
    else:
        assert out == NOON_UTC
        assert out.utcoffset() == timedelta(0)


@pytest.mark.parametrize(
    "stored",
    [
        datetime(2024, 1, 1, 12, 0, 0),
        datetime(2024, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2))),
    ],
    ids=["naive", "aware"],
)
def test_result_is_aware_utc(stored: datetime):
    out = UTCDateTime().process_result_value(stored, SQLiteDialect())
    assert out == NOON_UTC
    assert out.tzinfo is timezone.utc


def test_result_non_datetime_returned_unchanged():
    assert UTCDateTime().process_result_value("2024-01-01", SQLiteDialect()) == "2024-01-01"


def test_literal_compile_uses_utc_wall_time():
    expr = sa.literal(
        datetime(2024, 1, 1, 5, 0, 0, tzinfo=timezone(timedelta(hours=-7))),
        type_=UTCDateTime(),
    )
    sql = str(
        sa.select(expr.label("dt")).compile(
            dialect=SQLiteDialect(), compile_kwargs={"literal_binds": True}
        )
    )
    assert re.search(r"2024-01-01 12:00:00(\.\d+)?", sql)


# --- variants ---


def test_bigint_pk_is_integer_on_sqlite():
    """SQLite only autoincrements INTEGER primary keys."""
    assert _compile_type(BIGINT_PK, SQLiteDialect()) == "INTEGER"
    assert _compile_type(BIGINT_PK, PostgresDialect()) == "BIGINT"


def test_portable_json_is_jsonb_on_postgres():
    assert _compile_type(PORTABLE_JSON, PostgresDialect()) == "JSONB"
    assert _compile_type(PORTABLE_JSON, SQLiteDialect()) == "JSON"
