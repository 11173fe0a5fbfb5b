"""Adapters (infrastructure) for DATAMODELER.

Provide concrete implementations of the application ports: SQLAlchemy and
in-memory repositories, the integrity audit queries, and the units of work that
bundle them, plus persistence mapping and related wiring (engines, metadata,
migrations).

Dependency rule: may import `datamodeler.domain` and `datamodeler.interfaces`;
the domain must not import this package.
"""
