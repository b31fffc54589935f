"""
Row-lock interception demo.

Shows PostgreSQL row locking at work: one thread updates a row inside a
transaction it keeps open, while two other threads try to rename rows with a
conditional UPDATE outside any transaction.

- The interceptor aimed at the locked row waits for the commit and then
  matches nothing, because the flag it checks is already set.
- The interceptor aimed at the other row goes straight through.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from rowlock.config import Settings, get_settings
from rowlock.domain.models import ExperimentReport, InterceptOutcome, TaskReport
from rowlock.errors import RowLockError, StoreError, TransactionError
from rowlock.experiment import RowStore, StoreTransaction, insert, intercept_row, tx_update
from rowlock.orchestrator import run_experiment
from rowlock.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "ExperimentReport",
    "InterceptOutcome",
    "TaskReport",
    # Errors
    "RowLockError",
    "StoreError",
    "TransactionError",
    # Experiment
    "RowStore",
    "StoreTransaction",
    "insert",
    "intercept_row",
    "tx_update",
    "run_experiment",
    # Logging
    "configure_logging",
    "get_logger",
]
