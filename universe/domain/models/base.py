"""
Resource Model Base

Shared plumbing for the per-table models: list queries through the
clause builder, single-row lookups and partial updates. Each model
declares its table, key and allow-lists as class attributes.
"""

import logging
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Sequence

from universe.domain.query.builder import build_query_clauses, build_set_clause
from universe.domain.query.parse import (
    FilterParser,
    filter_allowed_fields,
    format_sql_columns,
    parse_filters,
)
from universe.infrastructure.adapters.base import BaseAdapter, TransactionConnection
from universe.shared.types.query import QueryConfig, QueryOptions

logger = logging.getLogger(__name__)


class ResourceModel:
    """
    Data access for one table.

    Subclasses set:
        TABLE: table name
        PRIMARY_KEY: key column used by get_by_id / patch / delete
        SELECT_FIELDS: columns returned by default
        QUERY_CONFIG: search / filter / sort allow-lists
        FILTER_PARSERS: per-field coercion of raw filter values
    """

    TABLE: ClassVar[str] = ""
    PRIMARY_KEY: ClassVar[str] = "id"
    SELECT_FIELDS: ClassVar[Sequence[str]] = ()
    QUERY_CONFIG: ClassVar[QueryConfig] = QueryConfig()
    FILTER_PARSERS: ClassVar[Dict[str, FilterParser]] = {}

    def __init__(self, adapter: BaseAdapter):
        self.adapter = adapter

    def _executor(self, conn: Optional[TransactionConnection]):
        return conn if conn is not None else self.adapter

    def get_all(self, options: Optional[QueryOptions] = None) -> List[Dict[str, Any]]:
        """List rows with search, filters, sort and pagination applied."""
        options = options or QueryOptions()
        parsed = parse_filters(options.filters or {}, self.FILTER_PARSERS)

        clauses = build_query_clauses(
            options.model_copy(update={"filters": parsed}),
            self.QUERY_CONFIG
        )
        sql = clauses.compose(f"SELECT {format_sql_columns(self.SELECT_FIELDS)} FROM {self.TABLE}")

        return self.adapter.execute(sql, clauses.values).rows

    def get_by_id(self, id: int, fields: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        """Row by primary key; requested ``fields`` outside SELECT_FIELDS are dropped."""
        selected = filter_allowed_fields(fields, self.SELECT_FIELDS) if fields else []
        columns = format_sql_columns(selected or self.SELECT_FIELDS)
        result = self.adapter.execute(
            f"SELECT {columns} FROM {self.TABLE} WHERE {self.PRIMARY_KEY} = ?",
            [id]
        )
        return result.first()

    def exists(self, id: int, conn: Optional[TransactionConnection] = None) -> bool:
        result = self._executor(conn).execute(
            f"SELECT COUNT(*) AS count FROM {self.TABLE} WHERE {self.PRIMARY_KEY} = ?",
            [id]
        )
        row = result.first()
        return bool(row and row["count"] > 0)

    def _patch_row(
        self,
        id: int,
        updates: Mapping[str, Any],
        conn: Optional[TransactionConnection] = None
    ) -> bool:
        set_clause = build_set_clause(updates)
        if not set_clause.sql:
            return False

        result = self._executor(conn).execute(
            f"UPDATE {self.TABLE} SET {set_clause.sql} WHERE {self.PRIMARY_KEY} = ?",
            [*set_clause.values, id]
        )
        return result.affected_rows > 0

    def delete(self, id: int, conn: Optional[TransactionConnection] = None) -> bool:
        result = self._executor(conn).execute(
            f"DELETE FROM {self.TABLE} WHERE {self.PRIMARY_KEY} = ?",
            [id]
        )
        deleted = result.affected_rows > 0
        if deleted:
            logger.info(f"Deleted {self.TABLE} row {id}")
        return deleted
