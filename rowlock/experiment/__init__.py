"""
Experiment package for the row-lock interception demo.

Re-exports the row-store contract and the three experiment components so
downstream code can import from `rowlock.experiment` directly.
"""

from rowlock.experiment.abstract import RowStore, StoreTransaction
from rowlock.experiment.interceptor import intercept_row
from rowlock.experiment.seed import insert
from rowlock.experiment.updater import DEFAULT_HOLD_SECONDS, tx_update

__all__ = [
    # Contract
    "RowStore",
    "StoreTransaction",
    # Components
    "DEFAULT_HOLD_SECONDS",
    "insert",
    "intercept_row",
    "tx_update",
]
