"""
psycopg implementation of the row-store contract.

Every ``execute``/``query_row`` call borrows a pooled connection for a single
statement, which the pool commits when the connection is returned. ``begin``
keeps one connection checked out until the transaction is committed or rolled
back, so any row lock it takes stays held for that whole span.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, Tuple

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool

from rowlock.errors import StoreError, TransactionError


class PooledTransaction:
    """A transaction pinned to one pooled connection."""

    def __init__(self, pool: ConnectionPool, conn: Connection) -> None:
        self._pool = pool
        self._conn = conn
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        if self._finished:
            raise TransactionError("transaction already finished")
        try:
            return self._conn.execute(sql, params).rowcount
        except psycopg.Error as exc:
            raise StoreError(f"statement failed: {exc}") from exc

    def commit(self) -> None:
        self._finish(self._conn.commit, "commit")

    def rollback(self) -> None:
        self._finish(self._conn.rollback, "rollback")

    def _finish(self, action: Callable[[], None], verb: str) -> None:
        if self._finished:
            raise TransactionError(f"cannot {verb}: transaction already finished")
        self._finished = True
        try:
            action()
        except psycopg.Error as exc:
            raise TransactionError(f"{verb} failed: {exc}", cause=exc) from exc
        finally:
            self._pool.putconn(self._conn)


class PooledRowStore:
    """
    Row store backed by a psycopg ConnectionPool.

    Safe to share across threads: the pool hands each caller its own
    connection.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            with self._pool.connection() as conn:
                return conn.execute(sql, params).rowcount
        except psycopg.Error as exc:
            raise StoreError(f"statement failed: {exc}") from exc

    def query_row(self, sql: str, params: Sequence[Any] = ()) -> Tuple[Any, ...]:
        try:
            with self._pool.connection() as conn:
                row = conn.execute(sql, params).fetchone()
        except psycopg.Error as exc:
            raise StoreError(f"query failed: {exc}") from exc
        if row is None:
            raise StoreError(f"no rows in result set (params={tuple(params)!r})")
        return tuple(row)

    def begin(self) -> PooledTransaction:
        try:
            conn = self._pool.getconn()
        except psycopg.Error as exc:
            raise TransactionError(f"begin failed: {exc}", cause=exc) from exc
        return PooledTransaction(self._pool, conn)


__all__ = ["PooledRowStore", "PooledTransaction"]
