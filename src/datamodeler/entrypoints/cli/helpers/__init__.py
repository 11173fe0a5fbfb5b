"""CLI helpers for DATAMODELER.

Database URL resolution and sanitization for safe display, and message
emitters that write to stderr with emoji→ASCII fallbacks.
"""

from .db_url import resolve_db_url, sanitize_url
from .messages import error, success, warn

__all__ = ["resolve_db_url", "sanitize_url", "warn", "success", "error"]
