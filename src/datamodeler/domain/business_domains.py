"""Business domains and data areas.

Organizational tags a system (and a data model) can be associated with. A data
area always belongs to exactly one domain.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DOMAIN_COLOR = "#3b82f6"
DEFAULT_DATA_AREA_COLOR = "#10b981"


@dataclass(frozen=True, slots=True)
class Domain:
    """A business domain (e.g. "Finance")."""

    id: int | None
    name: str
    description: str | None = None
    color_code: str = DEFAULT_DOMAIN_COLOR


@dataclass(frozen=True, slots=True)
class DataArea:
    """A data area inside a business domain (e.g. "Finance / Invoicing")."""

    id: int | None
    name: str
    domain_id: int
    description: str | None = None
    color_code: str = DEFAULT_DATA_AREA_COLOR
