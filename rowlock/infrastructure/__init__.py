"""
Infrastructure package for the row-lock interception demo.

Centralizes database connectivity concerns (pooling, schema setup, and the
psycopg-backed row store). Keep this layer focused on I/O and resource
management, decoupled from the experiment logic.
"""

from rowlock.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    get_pool,
    get_sync_connection,
)
from rowlock.infrastructure.row_store import PooledRowStore, PooledTransaction
from rowlock.infrastructure.schema import prepare_database

__all__ = [
    "PoolManager",
    "PooledRowStore",
    "PooledTransaction",
    "build_dsn",
    "get_pool",
    "get_sync_connection",
    "prepare_database",
]
