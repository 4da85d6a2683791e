"""
MySQL Adapter

MySQL / MariaDB is the production store for the catalog.

Features:
- Connection pooling
- SSL/TLS encryption
- Explicit transactions on a single pooled connection
"""

import logging
from typing import Any, Dict, List

import mysql.connector
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

from universe.infrastructure.adapters.base import BaseAdapter, AdapterResult, ConnectionError

logger = logging.getLogger(__name__)


class MySQLAdapter(BaseAdapter):
    """
    Adapter for MySQL database.

    Config options:
        host: MySQL server host (required)
        port: MySQL port (default: 3306)
        database: Database name (required)
        user: Username (required)
        password: Password (required)

        # Connection settings
        charset: Character set (default: utf8mb4)
        collation: Collation (default: utf8mb4_unicode_ci)
        connect_timeout: Connection timeout in seconds (default: 10)

        # SSL settings
        ssl_disabled: Disable SSL (default: False)
        ssl_ca: Path to CA certificate
        ssl_verify_cert: Verify server certificate (default: True)

        # Pool settings
        pool_size: Connection pool size (default: 5)
        pool_name: Pool name (default: "universe_pool")

    Example:
        adapter = MySQLAdapter({
            "host": "localhost",
            "database": "universe",
            "user": "universe",
            "password": "secret"
        })

        adapter.connect()
        result = adapter.execute(
            "SELECT * FROM planets WHERE planetary_system_id = ?",
            [4]
        )
    """

    ENGINE = "mysql"
    PLACEHOLDER = "%s"
    INSERT_IGNORE = "INSERT IGNORE"

    def __init__(self, config: Dict[str, Any]):
        """Initialize MySQL adapter."""
        super().__init__(config)

        required = ["host", "database", "user", "password"]
        missing = [k for k in required if k not in config]
        if missing:
            raise ConnectionError(
                f"Missing required config: {', '.join(missing)}",
                engine=self.ENGINE
            )

        self.host = config["host"]
        self.port = config.get("port", 3306)
        self.database = config["database"]
        self.user = config["user"]
        self.password = config["password"]

        self.charset = config.get("charset", "utf8mb4")
        self.collation = config.get("collation", "utf8mb4_unicode_ci")
        self.connect_timeout = config.get("connect_timeout", 10)

        self.ssl_disabled = config.get("ssl_disabled", False)
        self.ssl_ca = config.get("ssl_ca")
        self.ssl_verify_cert = config.get("ssl_verify_cert", True)

        self.pool_size = config.get("pool_size", 5)
        self.pool_name = config.get("pool_name", "universe_pool")

        self._pool = None

    def _build_connection_params(self) -> Dict[str, Any]:
        """Build connection parameters dict."""
        params = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "charset": self.charset,
            "collation": self.collation,
            "connect_timeout": self.connect_timeout,
            "autocommit": True,
            # affected_rows counts matched rows, as on SQLite
            "client_flags": [ClientFlag.FOUND_ROWS],
        }

        if self.ssl_disabled:
            params["ssl_disabled"] = True
        elif self.ssl_ca:
            params["ssl_ca"] = self.ssl_ca
            params["ssl_verify_cert"] = self.ssl_verify_cert

        return params

    def connect(self) -> None:
        """Create the connection pool and verify one connection."""
        try:
            logger.info(f"Connecting to MySQL: {self.host}:{self.port}/{self.database}")

            self._pool = pooling.MySQLConnectionPool(
                pool_name=self.pool_name,
                pool_size=self.pool_size,
                **self._build_connection_params()
            )
            conn = self._pool.get_connection()
            conn.close()

            self._connected = True
            logger.info(f"MySQL connected: {self.host}:{self.port}/{self.database}")

        except mysql.connector.Error as e:
            raise ConnectionError(
                f"Failed to connect to MySQL: {e}",
                engine=self.ENGINE,
                original_error=e
            )

    def disconnect(self) -> None:
        """Drop the pool; pooled connections close when returned."""
        self._pool = None
        self._connected = False

    def convert_placeholders(self, sql: str, params=None):
        """Convert ? placeholders to MySQL %s format."""
        return sql.replace("?", "%s"), list(params or [])

    def _acquire(self):
        return self._pool.get_connection()

    def _release(self, raw_connection) -> None:
        try:
            raw_connection.close()  # Returns to pool
        except mysql.connector.Error as e:
            logger.warning(f"Error returning MySQL connection to pool: {e}")

    def _begin(self, raw_connection) -> None:
        raw_connection.start_transaction()

    def _commit(self, raw_connection) -> None:
        raw_connection.commit()

    def _rollback(self, raw_connection) -> None:
        raw_connection.rollback()

    def _run(self, raw_connection, sql: str, params: List[Any]) -> AdapterResult:
        cursor = raw_connection.cursor(dictionary=True)
        try:
            if params:
                cursor.execute(sql, params)
            else:
                cursor.execute(sql)

            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            rows = cursor.fetchall() if cursor.description else []

            return AdapterResult(
                rows=list(rows),
                columns=columns,
                affected_rows=max(cursor.rowcount, 0),
                last_insert_id=cursor.lastrowid,
                engine=self.ENGINE,
                sql=sql,
                metadata={"host": self.host, "database": self.database}
            )
        finally:
            cursor.close()

    def health_check(self) -> bool:
        """Check MySQL connection health."""
        if not self._connected:
            return False
        try:
            self.execute("SELECT 1")
            return True
        except Exception:
            return False
