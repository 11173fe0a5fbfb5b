"""Repository implementations (SQLAlchemy Core and in-memory)."""
