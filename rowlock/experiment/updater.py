"""
Transactional updater: sets a row's flag and sits on the open transaction.

While the transaction is open the store holds an exclusive lock on the
modified row, so any competing UPDATE of that row waits for the commit.
"""

from __future__ import annotations

import time
from typing import Optional

from rowlock.errors import TransactionError
from rowlock.experiment.abstract import RowStore
from rowlock.utils.logging import get_logger

log = get_logger(__name__)

SET_FLAG_SQL = "UPDATE lock_test SET is_set = TRUE WHERE id = %s;"

DEFAULT_HOLD_SECONDS = 5.0


def tx_update(
    store: RowStore,
    row_id: Optional[int],
    name: str,
    hold_seconds: float = DEFAULT_HOLD_SECONDS,
) -> None:
    """
    Set ``is_set`` on the row inside a transaction held open for ``hold_seconds``.

    The sleep always happens between the update and the commit. If the update
    fails the transaction is rolled back and the update error re-raised; if the
    rollback fails too, a ``TransactionError`` carrying both errors is raised.

    Raises
    ------
    StoreError
        The update statement failed and the rollback succeeded.
    TransactionError
        Begin or commit failed, or the rollback after a failed update failed.
    """
    ns = f"[{name}]"
    tx = store.begin()
    log.info(f"{ns}: start update", extra={"row": name})
    try:
        tx.execute(SET_FLAG_SQL, (row_id,))
    except Exception as exc:
        try:
            tx.rollback()
        except TransactionError as rollback_exc:
            raise TransactionError.rollback_failed(exc, rollback_exc) from rollback_exc
        log.info(f"{ns}: rolled back", extra={"row": name})
        raise

    log.info(f"{ns}: before sleep", extra={"row": name})
    # Blocking on purpose: the row stays locked until commit.
    time.sleep(hold_seconds)
    log.info(f"{ns}: after sleep", extra={"row": name})
    tx.commit()


__all__ = ["DEFAULT_HOLD_SECONDS", "SET_FLAG_SQL", "tx_update"]
