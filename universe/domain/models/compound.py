"""
Compound Model

Local cache of PubChem compounds. Rows are created on demand the first
time a planet or atmosphere references a CID.
"""

import logging
from typing import Any, Callable, Dict, Optional

from universe.domain.models.base import ResourceModel
from universe.domain.query.parse import format_sql_columns
from universe.infrastructure.adapters.base import BaseAdapter, TransactionConnection
from universe.shared.types.query import QueryConfig

logger = logging.getLogger(__name__)

CompoundFetcher = Callable[[int], Dict[str, Any]]


class CompoundModel(ResourceModel):
    """
    ``compounds`` table plus the create-if-missing resolver.

    Args:
        adapter: Database adapter
        fetcher: ``cid -> {"CID", "name", "formula"}``, normally
            ``PubChemClient.fetch_compound``
    """

    TABLE = "compounds"
    PRIMARY_KEY = "CID"
    SELECT_FIELDS = ("CID", "name", "formula")

    QUERY_CONFIG = QueryConfig(
        searchable=("name", "formula"),
        filterable=("name", "formula"),
        sortable=("CID", "name", "formula"),
        default_sort="CID",
    )

    FILTER_PARSERS = {
        "name": str,
        "formula": str,
    }

    def __init__(self, adapter: BaseAdapter, fetcher: CompoundFetcher):
        super().__init__(adapter)
        self.fetcher = fetcher

    def _lookup(self, cid: int, conn: Optional[TransactionConnection]) -> Optional[Dict[str, Any]]:
        result = self._executor(conn).execute(
            f"SELECT {format_sql_columns(self.SELECT_FIELDS)} FROM compounds WHERE CID = ?",
            [cid]
        )
        return result.first()

    def ensure(self, cid: int, conn: Optional[TransactionConnection] = None) -> Dict[str, Any]:
        """
        Return the compound for ``cid``, fetching and storing it if missing.

        Runs on ``conn`` when given so the insert belongs to the caller's
        transaction. The insert ignores duplicates, so two requests racing
        on the same new CID both succeed.

        Raises:
            UniverseError: the directory does not know the CID (404)
        """
        existing = self._lookup(cid, conn)
        if existing:
            return existing

        compound = self.fetcher(cid)

        insert = conn.insert_ignore if conn is not None else self.adapter.INSERT_IGNORE
        self._executor(conn).execute(
            f"{insert} INTO compounds (CID, name, formula) VALUES (?, ?, ?)",
            [compound["CID"], compound["name"], compound["formula"]]
        )
        logger.info(f"Cached compound {cid} ({compound['name']})")

        return compound
