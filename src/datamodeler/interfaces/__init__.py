"""Interfaces (application boundary) for DATAMODELER.

Defines framework-free application contracts: the repository ports of the
persistence boundary, the unit of work, and the read-only integrity audit,
plus the small DTOs they return. Business rules stay out of this package.

Dependency rule: may import `datamodeler.domain` for entity types only. It may
be imported by `datamodeler.service_layer`, `datamodeler.adapters`, and
`datamodeler.bootstrap`.
"""
