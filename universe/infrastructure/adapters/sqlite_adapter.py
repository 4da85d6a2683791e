"""
SQLite Adapter

SQLite is used for:
- Local development and testing
- Single-file embedded catalogs
- In-memory databases for the test suite

Requirements:
    None - sqlite3 is included in Python standard library
"""

import os
import logging
import sqlite3
import threading
from typing import Any, Dict, List
from pathlib import Path

from universe.infrastructure.adapters.base import BaseAdapter, AdapterResult, ConnectionError

logger = logging.getLogger(__name__)


class SQLiteAdapter(BaseAdapter):
    """
    Adapter for SQLite databases.

    Supports file-based and in-memory SQLite databases. One connection is
    shared; a re-entrant lock gives each transaction exclusive use of it.

    Config options:
        database: Path to SQLite file or ':memory:' (required)
        create: Create the file when missing (default: False)
        read_only: Open in read-only mode (default: False)
        timeout: Connection timeout in seconds (default: 30)
        journal_mode: WAL, DELETE, TRUNCATE, etc. (default: WAL for files)
        foreign_keys: Enable foreign key constraints (default: True)

    Example (In-Memory):
        adapter = SQLiteAdapter({
            "database": ":memory:"
        })
    """

    ENGINE = "sqlite"
    PLACEHOLDER = "?"
    INSERT_IGNORE = "INSERT OR IGNORE"

    def __init__(self, config: Dict[str, Any]):
        """Initialize SQLite adapter."""
        super().__init__(config)

        if "database" not in config:
            raise ConnectionError(
                "Missing required config: database",
                engine=self.ENGINE
            )

        self.database = config["database"]
        self.is_memory = self.database == ":memory:"

        if not self.is_memory and not config.get("create", False):
            if not os.path.exists(self.database):
                raise ConnectionError(
                    f"Database file not found: {self.database}",
                    engine=self.ENGINE
                )

        self.read_only = config.get("read_only", False)
        self.timeout = config.get("timeout", 30.0)
        self.journal_mode = config.get("journal_mode", "WAL" if not self.is_memory else None)
        self.foreign_keys = config.get("foreign_keys", True)

        self._lock = threading.RLock()

    def _get_uri(self) -> str:
        """Build SQLite URI for a read-only connection."""
        path = Path(self.database).absolute()
        return f"file:{path}?mode=ro"

    def connect(self) -> None:
        """Connect to SQLite database."""
        try:
            if self.read_only and not self.is_memory:
                self._connection = sqlite3.connect(
                    self._get_uri(),
                    uri=True,
                    timeout=self.timeout,
                    isolation_level=None,
                    check_same_thread=False,
                )
            else:
                self._connection = sqlite3.connect(
                    self.database,
                    timeout=self.timeout,
                    isolation_level=None,
                    check_same_thread=False,
                )

            self._connection.row_factory = sqlite3.Row

            cursor = self._connection.cursor()
            if self.journal_mode and not self.is_memory:
                cursor.execute(f"PRAGMA journal_mode = {self.journal_mode}")
            if self.foreign_keys:
                cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

            self._connected = True
            logger.info(f"SQLite connected: {self.database}")

        except Exception as e:
            raise ConnectionError(
                f"Failed to connect to SQLite: {e}",
                engine=self.ENGINE,
                original_error=e
            )

    def disconnect(self) -> None:
        """Close SQLite connection."""
        try:
            if self._connection:
                self._connection.close()
                self._connection = None
        except Exception as e:
            logger.warning(f"Error closing SQLite connection: {e}")
        finally:
            self._connected = False

    def _acquire(self) -> sqlite3.Connection:
        self._lock.acquire()
        return self._connection

    def _release(self, raw_connection: sqlite3.Connection) -> None:
        self._lock.release()

    def _begin(self, raw_connection: sqlite3.Connection) -> None:
        raw_connection.execute("BEGIN")

    def _commit(self, raw_connection: sqlite3.Connection) -> None:
        raw_connection.execute("COMMIT")

    def _rollback(self, raw_connection: sqlite3.Connection) -> None:
        if raw_connection.in_transaction:
            raw_connection.execute("ROLLBACK")

    def _run(self, raw_connection: sqlite3.Connection, sql: str, params: List[Any]) -> AdapterResult:
        cursor = raw_connection.cursor()
        try:
            cursor.execute(sql, tuple(params))
            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            rows = [dict(row) for row in cursor.fetchall()] if cursor.description else []
            return AdapterResult(
                rows=rows,
                columns=columns,
                affected_rows=max(cursor.rowcount, 0),
                last_insert_id=cursor.lastrowid,
                engine=self.ENGINE,
                sql=sql,
                metadata={"database": self.database}
            )
        finally:
            cursor.close()

    def health_check(self) -> bool:
        """Check SQLite connection health."""
        if not self._connected:
            return False
        try:
            self.execute("SELECT 1")
            return True
        except Exception:
            return False

    def get_tables(self) -> List[str]:
        """Get list of tables in the database."""
        result = self.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row["name"] for row in result.rows]
