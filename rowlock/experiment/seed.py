"""
Seed loader: inserts the named rows the experiment works on.
"""

from __future__ import annotations

from rowlock.errors import StoreError
from rowlock.experiment.abstract import RowStore
from rowlock.utils.logging import get_logger

log = get_logger(__name__)

INSERT_ROW_SQL = "INSERT INTO lock_test (name) VALUES (%s) RETURNING id;"


def insert(store: RowStore, name: str) -> int:
    """
    Insert one row with the given name and a cleared flag.

    Returns
    -------
    int
        The identifier assigned by the store.

    Raises
    ------
    StoreError
        If the insert fails or no identifier comes back.
    """
    row = store.query_row(INSERT_ROW_SQL, (name,))
    try:
        row_id = int(row[0])
    except (IndexError, TypeError, ValueError) as exc:
        raise StoreError(f"insert of '{name}' returned no usable id: {row!r}") from exc
    log.debug(f"[{name}]: inserted with id={row_id}", extra={"row": name, "row_id": row_id})
    return row_id


__all__ = ["INSERT_ROW_SQL", "insert"]
