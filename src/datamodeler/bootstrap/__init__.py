"""Bootstrap (composition root) for DATAMODELER.

Assembles the application at runtime: wires concrete adapters to the
service-layer handlers, builds the message bus and the integrity audit, and
reads configuration.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `datamodeler.adapters`, `datamodeler.service_layer`,
  `datamodeler.interfaces`, `datamodeler.domain`, and `datamodeler.config`.
- Inner layers must not import `datamodeler.bootstrap`.
"""

from .bootstrap import AppContainer, bootstrap, bootstrap_in_memory

__all__ = ["AppContainer", "bootstrap", "bootstrap_in_memory"]
