"""
Error taxonomy for the row-lock interception demo.

Driver exceptions (``psycopg.Error``) never leak past the row store: they are
re-raised as ``StoreError`` or ``TransactionError`` with the original chained
as ``__cause__``.
"""

from __future__ import annotations

from typing import Optional


class RowLockError(Exception):
    """Base class for all errors raised by this package."""


class StoreError(RowLockError):
    """An insert, update, query or scan against the row store failed."""


class TransactionError(RowLockError):
    """
    Begin, commit or rollback of a store transaction failed.

    When a rollback fails while handling an earlier statement error, both are
    kept: ``cause`` is the statement error and ``rollback_error`` the rollback
    failure. The message names both.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        rollback_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.rollback_error = rollback_error

    @classmethod
    def rollback_failed(
        cls, cause: BaseException, rollback_error: BaseException
    ) -> "TransactionError":
        return cls(
            f"rollback failed: {rollback_error}; original error: {cause}",
            cause=cause,
            rollback_error=rollback_error,
        )


__all__ = ["RowLockError", "StoreError", "TransactionError"]
