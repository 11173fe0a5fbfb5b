"""Domain layer for DATAMODELER.

Contains business rules: entities, value objects, the identifier normalizer,
connection templates, the system record mapper and the integrity rules of the
layered model graph. This package is deliberately technology-agnostic.

Dependency rule: do not import from `datamodeler.adapters` or
`datamodeler.entrypoints`.
"""
