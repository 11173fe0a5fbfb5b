"""The one `MetaData` every modeling table attaches to.

The naming convention gives constraints stable names (``fk_<table>_<cols>_<ref>``,
``ck_<table>_<name>``, ...) so the migration can refer to them by name and
SQLite batch mode can recreate them.
"""

from sqlalchemy import MetaData

metadata = MetaData(
    naming_convention={
        "pk": "pk_%(table_name)s",
        "fk": "fk_%(table_name)s_%(column_0_N_name)s_%(referred_table_name)s",
        "uq": "uq_%(table_name)s_%(column_0_N_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "ix": "ix_%(table_name)s_%(column_0_N_label)s",
    }
)
