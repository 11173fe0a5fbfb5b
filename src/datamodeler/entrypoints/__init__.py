"""Entry points for DATAMODELER.

Thin outer layer: parses input, calls `datamodeler.bootstrap`, renders output.

Dependency rule: import `datamodeler.bootstrap` and `datamodeler.config`; keep
business rules out.
"""
