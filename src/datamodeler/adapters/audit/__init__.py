"""Integrity audit implementations (SQLAlchemy and in-memory)."""
