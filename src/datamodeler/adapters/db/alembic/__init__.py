"""Alembic migration scripts for DATAMODELER (see `datamodeler.config`)."""
