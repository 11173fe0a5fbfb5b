"""Database backends DATAMODELER can store models in.

Only PostgreSQL and SQLite are supported; `make_engine` refuses anything
else before a connection is attempted.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy.engine import make_url

if TYPE_CHECKING:
    from sqlalchemy.engine import URL, Connection, Engine


class UnsupportedDialect(Exception):
    """Raised for a database backend DATAMODELER cannot store models in."""


class DialectName(str, Enum):
    """Supported backends, valued by their SQLAlchemy dialect name."""

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str | None) -> DialectName:
        """Map a dialect name, alias or ``dialect+driver`` string to a member.

        Raises:
            UnsupportedDialect: The backend is not supported.
        """
        base = (dialect_str or "").strip().lower().partition("+")[0]
        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base == cls.SQLITE.value:
            return cls.SQLITE
        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_url(cls, url: str | URL) -> DialectName:
        """Backend of a database URL.

        Raises:
            sqlalchemy.exc.ArgumentError: ``url`` is not a database URL.
            UnsupportedDialect: The backend is not supported.
        """
        return cls.from_string(make_url(str(url)).get_backend_name())

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """Backend of an Engine or Connection."""
        try:
            name = obj.dialect.name
        except AttributeError as e:
            raise UnsupportedDialect(
                f"{type(obj).__name__} has no .dialect.name"
            ) from e
        return cls.from_string(name)
