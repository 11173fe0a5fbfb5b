"""Identifier normalization.

Multi-valued associations (a system's domains and data areas) cross JSON and
form boundaries as loosely-typed arrays. These helpers turn whatever arrives
into a clean list of numeric ids. They never raise: bad input degrades to an
empty result instead.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

Id = int | float

__all__ = ["Id", "coerce_numeric_id", "dedupe_ids", "normalize_ids"]


def coerce_numeric_id(value: object) -> Id | None:
    """Coerce a single value to a finite number, or None.

    Numbers pass through, strings are parsed (surrounding whitespace ignored).
    ``None``, booleans, blank or non-numeric strings, NaN and infinities all
    yield None. Integral values come back as ``int``.

    Examples:
        >>> coerce_numeric_id("5")
        5
        >>> coerce_numeric_id(2.5)
        2.5
        >>> coerce_numeric_id("abc") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def normalize_ids(value: object) -> list[Id]:
    """Normalize an unknown-shaped value into an ordered list of ids.

    Only lists and tuples are treated as sequences; anything else (including
    strings, dicts, sets and None) gives ``[]``. Elements that do not coerce
    to a finite number are dropped. Order is kept and duplicates are not
    removed; use `dedupe_ids` where set semantics are needed.

    Examples:
        >>> normalize_ids([3, "5", None, float("nan"), "x", 7])
        [3, 5, 7]
        >>> normalize_ids("1,2")
        []
    """
    if not isinstance(value, (list, tuple)):
        return []
    return [
        number for number in map(coerce_numeric_id, value) if number is not None
    ]


def dedupe_ids(ids: Iterable[Id]) -> list[Id]:
    """Drop repeated ids, keeping the first occurrence of each."""
    return list(dict.fromkeys(ids))
