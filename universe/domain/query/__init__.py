"""
Query Layer

Clause builder and request value parsing shared by every resource model.
"""

from universe.domain.query.builder import (
    build_filter_clause,
    build_in_clause,
    build_pagination_clause,
    build_query_clauses,
    build_search_clause,
    build_set_clause,
    build_sort_clause,
    placeholders_for,
    row_values,
)
from universe.domain.query.parse import (
    filter_allowed_fields,
    format_sql_columns,
    parse_bool,
    parse_field_list,
    parse_filters,
    parse_id,
    parse_int,
    parse_number,
)

__all__ = [
    "build_filter_clause",
    "build_in_clause",
    "build_pagination_clause",
    "build_query_clauses",
    "build_search_clause",
    "build_set_clause",
    "build_sort_clause",
    "placeholders_for",
    "row_values",
    "filter_allowed_fields",
    "format_sql_columns",
    "parse_bool",
    "parse_field_list",
    "parse_filters",
    "parse_id",
    "parse_int",
    "parse_number",
]
