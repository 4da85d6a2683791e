from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class QueryConfig:
    """
    Static allow-lists for one resource table.

    Only names listed here are ever written into SQL by the query builder.
    """
    searchable: Tuple[str, ...] = ()
    filterable: Tuple[str, ...] = ()
    sortable: Tuple[str, ...] = ()
    default_sort: str = "id"


class QueryOptions(BaseModel):
    """Per-request list options: pagination, sort, free-text search and filters."""
    page: Optional[int] = Field(default=None, gt=0)
    limit: Optional[int] = Field(default=None, gt=0)
    sort: Optional[str] = None
    search: Optional[str] = None
    filters: Dict[str, Any] = Field(default_factory=dict)


class SQLFragment(NamedTuple):
    sql: str
    values: List[Any]


@dataclass
class QueryClauses:
    """
    WHERE / ORDER BY / LIMIT fragments for a list query.

    ``values`` holds search values, then filter values, then pagination
    values; that is the order the fragments appear in ``compose()``.
    """
    where_sql: str
    sort_sql: str
    page_sql: str
    values: List[Any] = field(default_factory=list)

    def compose(self, select_sql: str) -> str:
        parts = [select_sql, self.where_sql, self.sort_sql, self.page_sql]
        return " ".join(part for part in parts if part)
