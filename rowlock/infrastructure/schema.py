"""
Schema setup for the ``lock_test`` table.

Runs before each experiment: creates the table when missing and truncates it
so identifiers start from 1 again.
"""

from __future__ import annotations

from typing import Optional

import psycopg

from rowlock.infrastructure.db_factory import get_sync_connection
from rowlock.utils.logging import get_logger

log = get_logger(__name__)

TABLE_NAME = "lock_test"

CREATE_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL DEFAULT '',
    is_set BOOLEAN NOT NULL DEFAULT FALSE
);
"""

TRUNCATE_TABLE_SQL = f"TRUNCATE TABLE {TABLE_NAME} RESTART IDENTITY;"


def ensure_schema(conn: psycopg.Connection) -> None:
    conn.execute(CREATE_TABLE_SQL)


def reset_table(conn: psycopg.Connection) -> None:
    conn.execute(TRUNCATE_TABLE_SQL)


def prepare_database(dsn: Optional[str] = None) -> None:
    """
    Create the table if needed and empty it, in a single committed transaction.

    Raises
    ------
    psycopg.Error
        If the connection (after retries) or either statement fails.
    """
    with get_sync_connection(dsn) as conn:
        ensure_schema(conn)
        reset_table(conn)
    log.info("Database prepared", extra={"table": TABLE_NAME})


__all__ = [
    "TABLE_NAME",
    "CREATE_TABLE_SQL",
    "TRUNCATE_TABLE_SQL",
    "ensure_schema",
    "reset_table",
    "prepare_database",
]
