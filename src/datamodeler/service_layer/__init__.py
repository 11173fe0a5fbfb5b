"""Service layer for DATAMODELER.

Implements application use-cases: command handlers, read-side queries, the
integrity checks that guard every graph write, and transaction boundaries.
Calls domain objects and the ports defined in `datamodeler.interfaces`.

Dependency rule: may import `datamodeler.domain` and `datamodeler.interfaces`,
but not `datamodeler.adapters` or `datamodeler.entrypoints`.
"""
