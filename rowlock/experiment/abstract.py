"""
Row-store contract consumed by the experiment.

The experiment never talks to a driver directly. It needs single statements
executed outside any transaction, single-row queries, and transactions it
can commit or roll back explicitly. ``rowlock.infrastructure.row_store``
provides the psycopg implementation; tests provide in-memory fakes.

Implementations raise ``StoreError`` for statement failures and
``TransactionError`` for begin/commit/rollback failures.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, Tuple, runtime_checkable


@runtime_checkable
class StoreTransaction(Protocol):
    """An open transaction. Exactly one of ``commit`` or ``rollback`` ends it."""

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement inside the transaction and return the rows affected."""
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


@runtime_checkable
class RowStore(Protocol):
    """
    Handle on the external row store.

    Must be safe to use from several threads at once.
    """

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a single auto-committed statement and return the rows affected."""
        ...

    def query_row(self, sql: str, params: Sequence[Any] = ()) -> Tuple[Any, ...]:
        """
        Run a statement expected to yield one row and return it.

        Raises ``StoreError`` when no row comes back.
        """
        ...

    def begin(self) -> StoreTransaction:
        """Open a transaction scoped to the caller."""
        ...


__all__ = ["RowStore", "StoreTransaction"]
