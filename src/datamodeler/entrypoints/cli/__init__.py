"""Command-line interface for DATAMODELER."""
