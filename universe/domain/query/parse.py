"""
Request Value Parsing

Typed coercion of raw query-string values and column-list helpers shared
by every resource model.
"""

import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from universe.errors import UniverseError, filter_invalid, invalid_id

FilterParser = Callable[[Any], Any]


def parse_bool(value: Any) -> bool:
    """Query-string boolean: ``true``, ``1`` and ``True`` are true."""
    return value is True or value in ("true", "1")


def parse_number(value: Any) -> float:
    """``float()`` that also rejects booleans and blank strings."""
    if isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        return math.nan
    return float(value)


def parse_int(value: Any) -> int:
    number = parse_number(value)
    if math.isnan(number) or not number.is_integer():
        raise ValueError(f"not an integer: {value!r}")
    return int(number)


_NUMERIC_PARSERS = (parse_number, parse_int, float, int)


def parse_filters(filters: Mapping[str, Any], parsers: Mapping[str, FilterParser]) -> Dict[str, Any]:
    """
    Apply per-field parsers to raw filter values.

    Only fields in ``parsers`` are kept. A parser error, or a NaN from a
    numeric parser, raises a 400 naming the field.
    """
    parsed: Dict[str, Any] = {}

    for key, parser in parsers.items():
        raw = filters.get(key)
        if raw is None:
            continue

        try:
            value = parser(raw)
        except UniverseError:
            raise
        except Exception as e:
            raise filter_invalid(key) from e

        if isinstance(value, float) and math.isnan(value):
            expected = "number" if parser in _NUMERIC_PARSERS else None
            raise filter_invalid(key, expected=expected)

        parsed[key] = value

    return parsed


def parse_id(value: Any) -> int:
    """Parse a route id as a positive integer."""
    try:
        parsed = parse_int(value)
    except (TypeError, ValueError) as e:
        raise invalid_id(value) from e
    if parsed <= 0:
        raise invalid_id(value)
    return parsed


def filter_allowed_fields(fields: Iterable[str], allowed: Iterable[str]) -> List[str]:
    """Keep only the requested fields that are in the allow-list."""
    allowed_set = set(allowed)
    return [f for f in fields if f in allowed_set]


def format_sql_columns(fields: Optional[Iterable[str]]) -> str:
    """Backtick-quote and comma-join column names."""
    return ", ".join(f"`{f}`" for f in (fields or []))


def parse_field_list(fields: Any) -> Optional[List[str]]:
    """Split ``"a,b,c"`` into a list; anything that is not a string gives None."""
    if not isinstance(fields, str):
        return None
    return [f.strip() for f in fields.split(",") if f.strip()]


__all__ = [
    "FilterParser",
    "filter_allowed_fields",
    "format_sql_columns",
    "parse_bool",
    "parse_field_list",
    "parse_filters",
    "parse_id",
    "parse_int",
    "parse_number",
]
