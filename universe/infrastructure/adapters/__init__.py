"""
Database Adapters

This package provides a unified interface for the catalog's databases.
Each adapter handles:
- Connection management
- Statement execution
- Parameter placeholder conversion
- Transactions on a single connection

Supported Engines:
- SQLite (built-in, used by the test suite)
- MySQL / MariaDB
"""

from universe.infrastructure.adapters.base import (
    AdapterError,
    AdapterResult,
    BaseAdapter,
    ConnectionError,
    QueryError,
    TransactionConnection,
)
from universe.infrastructure.adapters.factory import (
    adapter_from_url,
    close_all_adapters,
    get_adapter,
    list_adapters,
    parse_database_url,
    register_adapter,
)

__all__ = [
    "AdapterError",
    "AdapterResult",
    "BaseAdapter",
    "ConnectionError",
    "QueryError",
    "TransactionConnection",
    "adapter_from_url",
    "close_all_adapters",
    "get_adapter",
    "list_adapters",
    "parse_database_url",
    "register_adapter",
]
