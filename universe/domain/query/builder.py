"""
SQL Clause Builder

Translates list options (search, filters, sort, page/limit) into
parameterized SQL fragments for one resource table.

Column names only ever come from the resource's static QueryConfig;
request values only ever travel as bind parameters.

Usage:
    clauses = build_query_clauses(
        QueryOptions(search="ice", filters={"has_rings": True}, sort="-mass_earth", page=2, limit=10),
        PlanetModel.QUERY_CONFIG,
    )
    sql = clauses.compose("SELECT `planet_id`, `name` FROM planets")
    adapter.execute(sql, clauses.values)
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from universe.shared.types.query import QueryClauses, QueryConfig, QueryOptions, SQLFragment

logger = logging.getLogger(__name__)


def build_search_clause(search: Optional[str], columns: Sequence[str]) -> SQLFragment:
    """
    Build ``(c1 LIKE ? OR c2 LIKE ? ...)`` across every searchable column.

    The same ``%search%`` pattern is bound once per column.
    """
    if not search or not columns:
        return SQLFragment("", [])

    conditions = " OR ".join(f"{col} LIKE ?" for col in columns)
    values = [f"%{search}%" for _ in columns]

    return SQLFragment(f"({conditions})", values)


def build_filter_clause(filters: Mapping[str, Any], allowed: Iterable[str]) -> SQLFragment:
    """
    Build ``col = ? AND ...`` exact matches.

    Walks the allow-list, not the request: keys outside it are dropped and
    allowed columns missing from ``filters`` are skipped.
    """
    conditions = []
    values = []

    for key in allowed:
        if key in filters and filters[key] is not None:
            conditions.append(f"{key} = ?")
            values.append(filters[key])

    return SQLFragment(" AND ".join(conditions), values)


def build_sort_clause(sort: Optional[str], allowed: Sequence[str], fallback: str) -> str:
    """
    Resolve a sort request to ``"<column> <ASC|DESC>"``.

    Accepted forms: ``col``, ``-col``, ``col:asc``, ``col:desc``. An
    unknown direction sorts ascending. A column outside the allow-list
    returns ``fallback`` unchanged.
    """
    if not sort:
        return fallback

    column = sort
    direction = "ASC"

    if sort.startswith("-"):
        column = sort[1:]
        direction = "DESC"
    elif ":" in sort:
        parts = sort.split(":")
        column = parts[0]
        direction = "DESC" if len(parts) > 1 and parts[1].upper() == "DESC" else "ASC"

    if column not in allowed:
        logger.debug(f"Ignoring sort on non-sortable column: {column!r}")
        return fallback

    return f"{column} {direction}"


def build_pagination_clause(page: Optional[int], limit: Optional[int]) -> SQLFragment:
    """
    Build ``LIMIT ? OFFSET ?``.

    Pagination is off unless both page and limit are given. Both are clamped
    to at least 1 before the offset is computed, so ``(0, -5)`` still pages.
    """
    if page is None or limit is None:
        return SQLFragment("", [])

    safe_page = max(1, int(page))
    safe_limit = max(1, int(limit))
    offset = (safe_page - 1) * safe_limit

    return SQLFragment("LIMIT ? OFFSET ?", [safe_limit, offset])


def build_query_clauses(options: QueryOptions, config: QueryConfig) -> QueryClauses:
    """
    Build WHERE, ORDER BY and LIMIT/OFFSET for a list query.

    WHERE is omitted when there is nothing to match; ORDER BY is always
    present. Values are ordered search, filter, pagination.
    """
    search = build_search_clause(options.search, config.searchable)
    filters = build_filter_clause(options.filters or {}, config.filterable)

    conditions = [fragment.sql for fragment in (search, filters) if fragment.sql]
    where_sql = f"WHERE {' AND '.join(conditions)}" if conditions else ""

    sort_sql = f"ORDER BY {build_sort_clause(options.sort, config.sortable, config.default_sort)}"
    page = build_pagination_clause(options.page, options.limit)

    return QueryClauses(
        where_sql=where_sql,
        sort_sql=sort_sql,
        page_sql=page.sql,
        values=[*search.values, *filters.values, *page.values],
    )


def build_set_clause(updates: Mapping[str, Any]) -> SQLFragment:
    """
    Build ``col = ?, ...`` for an UPDATE, in the mapping's order.

    Callers pass only columns they intend to write and must skip the
    UPDATE when the returned SQL is empty.
    """
    keys = list(updates.keys())
    return SQLFragment(", ".join(f"{key} = ?" for key in keys), [updates[key] for key in keys])


def build_in_clause(column: str, values: Sequence[Any]) -> SQLFragment:
    """Build ``column IN (?, ?, ...)`` for a batch lookup."""
    placeholders = ", ".join("?" for _ in values)
    return SQLFragment(f"{column} IN ({placeholders})", list(values))


def placeholders_for(columns: Sequence[str]) -> str:
    """``?, ?, ?`` for an INSERT over ``columns``."""
    return ", ".join("?" for _ in columns)


def row_values(data: Dict[str, Any], columns: Sequence[str]) -> list:
    """Values of ``data`` in column order (missing keys bind NULL)."""
    return [data.get(col) for col in columns]
