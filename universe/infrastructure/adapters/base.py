"""
Base Adapter Interface

All database adapters implement this interface so resource models can run
the same parameterized SQL against SQLite and MySQL.

DESIGN PRINCIPLES:
-----------------
1. Connection pooling handled by adapter (not caller)
2. Query parameters use ? placeholders (adapter converts as needed)
3. Results returned as list of dicts (engine-agnostic)
4. Errors wrapped in AdapterError for consistent handling
5. A transaction owns exactly one connection from acquire to release
"""

import logging
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class AdapterError(Exception):
    """Base exception for adapter errors."""

    def __init__(self, message: str, engine: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.engine = engine
        self.original_error = original_error


class ConnectionError(AdapterError):
    """Failed to connect to database."""
    pass


class QueryError(AdapterError):
    """Query execution failed."""
    pass


@dataclass
class AdapterResult:
    """
    Standardized result from statement execution.

    Attributes:
        rows: List of result rows as dicts
        columns: List of column names
        row_count: Number of rows returned
        affected_rows: Rows changed by INSERT/UPDATE/DELETE
        last_insert_id: Auto-increment id produced by an INSERT
        execution_time_ms: Execution time in milliseconds
        engine: Database engine name
        sql: Executed SQL (with placeholders, not values)
    """
    rows: List[Dict[str, Any]]
    columns: List[str]
    row_count: int = 0
    affected_rows: int = 0
    last_insert_id: Optional[int] = None
    execution_time_ms: float = 0.0
    engine: str = ""
    sql: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.row_count = len(self.rows)

    def first(self) -> Optional[Dict[str, Any]]:
        """Return the first row or None."""
        return self.rows[0] if self.rows else None


class TransactionConnection:
    """
    Handle on one connection with an open transaction.

    Handed to code that must take part in the caller's unit of work. It
    can execute statements but never commits or rolls back.
    """

    def __init__(self, adapter: "BaseAdapter", raw_connection: Any):
        self.adapter = adapter
        self._raw = raw_connection

    @property
    def engine(self) -> str:
        return self.adapter.ENGINE

    @property
    def insert_ignore(self) -> str:
        return self.adapter.INSERT_IGNORE

    def execute(self, sql: str, params: Optional[List[Any]] = None) -> AdapterResult:
        return self.adapter._execute_on(self._raw, sql, params)


class BaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Each adapter must implement:
    - connect(): Establish database connection (or pool)
    - disconnect(): Close connection
    - health_check(): Verify connection is alive
    - _acquire() / _release(): Check a raw connection out and back in
    - _begin(), _commit(), _rollback(): Transaction control on a raw connection
    - _run(): Execute one statement on a raw connection

    Usage:
        adapter = SQLiteAdapter({"database": ":memory:"})
        adapter.connect()

        result = adapter.execute(
            "SELECT * FROM stars WHERE star_id = ?",
            [1]
        )

        with adapter.transaction() as conn:
            conn.execute("UPDATE planets SET name = ? WHERE planet_id = ?", ["Io", 3])
    """

    # Engine identifier (e.g., "sqlite", "mysql")
    ENGINE: str = "base"

    # Placeholder format used by this engine
    PLACEHOLDER: str = "?"

    # Idempotent insert verb for this engine
    INSERT_IGNORE: str = "INSERT IGNORE"

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize adapter with connection configuration.

        Args:
            config: Database-specific configuration dict
                    (host, port, user, password, database, etc.)
        """
        self.config = config
        self._connection = None
        self._connected = False
        self._last_used = None

    @abstractmethod
    def connect(self) -> None:
        """
        Establish connection to database.

        Raises:
            ConnectionError: If connection fails
        """
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """
        Close database connection.

        Should be safe to call even if not connected.
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if connection is alive and usable."""
        pass

    @abstractmethod
    def _acquire(self) -> Any:
        pass

    @abstractmethod
    def _release(self, raw_connection: Any) -> None:
        pass

    @abstractmethod
    def _begin(self, raw_connection: Any) -> None:
        pass

    @abstractmethod
    def _commit(self, raw_connection: Any) -> None:
        pass

    @abstractmethod
    def _rollback(self, raw_connection: Any) -> None:
        pass

    @abstractmethod
    def _run(self, raw_connection: Any, sql: str, params: List[Any]) -> AdapterResult:
        """Execute one converted statement and build the result."""
        pass

    def convert_placeholders(self, sql: str, params: Optional[List[Any]] = None) -> Tuple[str, List[Any]]:
        """
        Convert ? placeholders to engine-specific format.

        Default implementation returns sql unchanged.
        Override in adapters that need a different placeholder (MySQL: %s).

        Returns:
            (converted_sql, params)
        """
        return sql, list(params or [])

    def execute(self, sql: str, params: Optional[List[Any]] = None) -> AdapterResult:
        """
        Execute one statement on its own connection, outside any transaction.

        Args:
            sql: SQL with ? placeholders for parameters
            params: Parameter values (order matches ? positions)

        Raises:
            QueryError: If execution fails
        """
        self._ensure_connected()
        raw = self._acquire()
        try:
            return self._execute_on(raw, sql, params)
        finally:
            self._release(raw)

    @contextmanager
    def transaction(self) -> Iterator[TransactionConnection]:
        """
        Run a unit of work on one dedicated connection.

        Commits when the block exits normally. Any exception rolls the
        transaction back and is re-raised unchanged.
        """
        self._ensure_connected()
        raw = self._acquire()
        try:
            self._begin(raw)
            try:
                yield TransactionConnection(self, raw)
            except BaseException:
                logger.debug(f"{self.ENGINE}: rolling back transaction")
                self._rollback(raw)
                raise
            self._commit(raw)
        finally:
            self._release(raw)

    def _execute_on(self, raw_connection: Any, sql: str, params: Optional[List[Any]]) -> AdapterResult:
        self._update_last_used()
        engine_sql, engine_params = self.convert_placeholders(sql, params)
        start_time = time.perf_counter()
        try:
            result = self._run(raw_connection, engine_sql, engine_params)
        except Exception as e:
            raise QueryError(
                f"{self.ENGINE} query failed: {e}",
                engine=self.ENGINE,
                original_error=e
            ) from e
        result.execution_time_ms = (time.perf_counter() - start_time) * 1000
        return result

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise QueryError(
                f"Not connected to {self.ENGINE}",
                engine=self.ENGINE
            )

    def is_connected(self) -> bool:
        """Check if adapter has an active connection."""
        return self._connected

    def get_engine_info(self) -> Dict[str, Any]:
        """Get information about this adapter/engine."""
        return {
            "engine": self.ENGINE,
            "connected": self._connected,
            "placeholder": self.PLACEHOLDER,
            "last_used": self._last_used.isoformat() if self._last_used else None
        }

    def _update_last_used(self):
        """Update last used timestamp."""
        self._last_used = datetime.now(timezone.utc)

    def __enter__(self):
        """Context manager support."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager cleanup."""
        self.disconnect()
        return False
