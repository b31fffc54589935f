"""
Pytest configuration for the row-lock interception demo.

Provides fixtures for:
- Settings override with short experiment delays
- Database connection management for integration tests
- An in-memory row store that imitates PostgreSQL row locking for unit tests
"""

from __future__ import annotations

import os
import threading
from typing import Any, Dict, Generator, List, Optional, Sequence, Tuple

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from rowlock.config import Settings
from rowlock.errors import StoreError, TransactionError
from rowlock.experiment.interceptor import INTERCEPT_SQL, SELECT_ROW_SQL
from rowlock.experiment.seed import INSERT_ROW_SQL
from rowlock.experiment.updater import SET_FLAG_SQL
from rowlock.infrastructure.row_store import PooledRowStore
from rowlock.infrastructure.schema import prepare_database

SHORT_HOLD_SECONDS = 0.6
SHORT_INTERCEPT_DELAY_SECONDS = 0.15


class FakeTransaction:
    """
    Transaction on FakeRowStore.

    Flag updates take the row lock and stay invisible to other callers until
    commit, like an uncommitted UPDATE under READ COMMITTED.
    """

    def __init__(self, store: "FakeRowStore") -> None:
        self._store = store
        self._held: List[threading.Lock] = []
        self._pending: Dict[int, Dict[str, Any]] = {}
        self.statements: List[Tuple[str, Tuple[Any, ...]]] = []
        self.committed = False
        self.rolled_back = False

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        self.statements.append((sql, tuple(params)))
        if self._store.statement_error is not None:
            raise self._store.statement_error
        if sql != SET_FLAG_SQL:
            raise StoreError(f"unsupported statement in transaction: {sql}")
        (row_id,) = params
        lock = self._store.row_lock(row_id)
        if lock is None:
            return 0
        if lock not in self._held:
            lock.acquire()
            self._held.append(lock)
        self._pending[row_id] = {"is_set": True}
        return 1

    def commit(self) -> None:
        if self.committed or self.rolled_back:
            raise TransactionError("transaction already finished")
        self.committed = True
        try:
            if self._store.commit_error is not None:
                raise TransactionError(f"commit failed: {self._store.commit_error}")
            for row_id, changes in self._pending.items():
                self._store.rows[row_id].update(changes)
        finally:
            self._release()

    def rollback(self) -> None:
        if self.committed or self.rolled_back:
            raise TransactionError("transaction already finished")
        self.rolled_back = True
        self._pending.clear()
        self._release()
        if self._store.rollback_error is not None:
            raise TransactionError(f"rollback failed: {self._store.rollback_error}")

    def _release(self) -> None:
        while self._held:
            self._held.pop().release()


class FakeRowStore:
    """
    In-memory stand-in for the row store.

    Understands exactly the statements the experiment issues. Each row has a
    lock: transactions hold it until they finish, and the auto-committed
    intercept UPDATE waits for it before checking the flag.
    """

    def __init__(self) -> None:
        self.rows: Dict[int, Dict[str, Any]] = {}
        self.transactions: List[FakeTransaction] = []
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.statement_error: Optional[Exception] = None
        self.commit_error: Optional[Exception] = None
        self.rollback_error: Optional[Exception] = None
        self.begin_error: Optional[Exception] = None
        self._failures: List[Tuple[str, Optional[Tuple[Any, ...]], Exception]] = []
        self._locks: Dict[int, threading.Lock] = {}
        self._meta = threading.Lock()
        self._next_id = 1

    def fail_when(
        self, sql: str, exc: Exception, params: Optional[Sequence[Any]] = None
    ) -> None:
        self._failures.append((sql, tuple(params) if params is not None else None, exc))

    def row_lock(self, row_id: Any) -> Optional[threading.Lock]:
        with self._meta:
            return self._locks.get(row_id)

    def add_row(self, name: str, is_set: bool = False) -> int:
        with self._meta:
            row_id = self._next_id
            self._next_id += 1
            self.rows[row_id] = {"name": name, "is_set": is_set}
            self._locks[row_id] = threading.Lock()
            return row_id

    def _record(self, sql: str, params: Sequence[Any]) -> Tuple[Any, ...]:
        args = tuple(params)
        with self._meta:
            self.calls.append((sql, args))
        for fail_sql, fail_params, exc in self._failures:
            if fail_sql == sql and (fail_params is None or fail_params == args):
                raise exc
        return args

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        args = self._record(sql, params)
        if sql != INTERCEPT_SQL:
            raise StoreError(f"unsupported statement: {sql}")
        new_name, row_id = args
        lock = self.row_lock(row_id)
        if lock is None:
            return 0
        with lock:
            row = self.rows[row_id]
            if row["is_set"]:
                return 0
            row["name"] = new_name
            return 1

    def query_row(self, sql: str, params: Sequence[Any] = ()) -> Tuple[Any, ...]:
        args = self._record(sql, params)
        if sql == INSERT_ROW_SQL:
            return (self.add_row(args[0]),)
        if sql == SELECT_ROW_SQL:
            row = self.rows.get(args[0])
            if row is None:
                raise StoreError("no rows in result set")
            return (row["name"], row["is_set"])
        raise StoreError(f"unsupported query: {sql}")

    def begin(self) -> FakeTransaction:
        if self.begin_error is not None:
            raise TransactionError(f"begin failed: {self.begin_error}")
        tx = FakeTransaction(self)
        self.transactions.append(tx)
        return tx


@pytest.fixture
def fake_store() -> FakeRowStore:
    return FakeRowStore()


@pytest.fixture
def short_settings() -> Settings:
    """
    Settings with delays short enough for unit tests, still ordered
    intercept delay < hold.
    """
    return Settings(
        hold_seconds=SHORT_HOLD_SECONDS,
        intercept_delay_seconds=SHORT_INTERCEPT_DELAY_SECONDS,
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "rowlock"),
        log_level="DEBUG",
        hold_seconds=1.5,
        intercept_delay_seconds=0.3,
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_pool(
    test_dsn: str, db_connection_available: bool
) -> Generator[ConnectionPool, None, None]:
    """
    Provide a session-scoped connection pool for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    pool = ConnectionPool(conninfo=test_dsn, min_size=1, max_size=4, open=True)
    try:
        yield pool
    finally:
        pool.close()


@pytest.fixture(scope="function")
def clean_store(db_pool: ConnectionPool, test_dsn: str) -> PooledRowStore:
    """
    Create and truncate the lock_test table before each test function.
    """
    prepare_database(test_dsn)
    return PooledRowStore(db_pool)
