"""
Interceptor: a conditional update issued outside any transaction.

The update only matches while ``is_set`` is still false. Against a row held by
the transactional updater the statement waits for the row lock and, once the
updater commits, finds the flag set and matches nothing. The affected-row
count is therefore the signal of whether the row was locked.
"""

from __future__ import annotations

from typing import Optional

from rowlock.domain.models import SENTINEL_NAME, InterceptOutcome
from rowlock.experiment.abstract import RowStore
from rowlock.utils.logging import get_logger

log = get_logger(__name__)

INTERCEPT_SQL = "UPDATE lock_test SET name = %s WHERE id = %s AND is_set = FALSE;"
SELECT_ROW_SQL = "SELECT name, is_set FROM lock_test WHERE id = %s;"


def intercept_row(store: RowStore, row_id: Optional[int], name: str) -> InterceptOutcome:
    """
    Try to rename the row to the sentinel, then read it back.

    The read happens whether or not the update matched. Errors from either
    statement propagate unchanged; nothing is retried.
    """
    ns = f"[{name}]"
    log.info(f"{ns}: start intercept", extra={"row": name})
    rows_affected = store.execute(INTERCEPT_SQL, (SENTINEL_NAME, row_id))
    log.info(
        f"{ns}: updated, {rows_affected} rows affected",
        extra={"row": name, "rows_affected": rows_affected},
    )

    log.info(f"{ns}: querying data", extra={"row": name})
    current_name, is_set = store.query_row(SELECT_ROW_SQL, (row_id,))
    outcome = InterceptOutcome(
        rows_affected=rows_affected, name=current_name, is_set=bool(is_set)
    )
    log.info(
        f"{ns}: completed. name={outcome.name} and is_set={str(outcome.is_set).lower()}",
        extra={"row": name},
    )
    return outcome


__all__ = ["INTERCEPT_SQL", "SELECT_ROW_SQL", "intercept_row"]
