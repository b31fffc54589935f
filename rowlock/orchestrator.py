"""
Orchestrator for the row-lock interception experiment.

Seeds two rows, then races three threads against each other:

- the transactional updater on the first row ("john"),
- a delayed interceptor on the same row,
- a delayed interceptor on the second row ("jane"), which nothing locks.

Usage:
    from rowlock.orchestrator import run_experiment

    report = run_experiment(store)
    print(report.task("intercept", "john").outcome)

Task failures are logged and recorded in the report; they never stop the
other tasks, and the run always ends with the "terminating" log line.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from rowlock.config import Settings, get_settings
from rowlock.domain.models import ExperimentReport, InterceptOutcome, TaskReport
from rowlock.errors import RowLockError
from rowlock.experiment.abstract import RowStore
from rowlock.experiment.interceptor import intercept_row
from rowlock.experiment.seed import insert
from rowlock.experiment.updater import tx_update
from rowlock.utils.logging import get_logger

log = get_logger(__name__)

LOCKED_ROW = "john"
FREE_ROW = "jane"
SEED_NAMES = (LOCKED_ROW, FREE_ROW)

TX_UPDATE = "tx_update"
INTERCEPT = "intercept"


def _seed_rows(store: RowStore, names: tuple[str, ...] = SEED_NAMES) -> Dict[str, Optional[int]]:
    """Insert each row; a failed insert is logged and leaves its id as None."""
    row_ids: Dict[str, Optional[int]] = {}
    for name in names:
        try:
            row_ids[name] = insert(store, name)
        except RowLockError:
            log.exception(f"[{name}]: insert failed", extra={"row": name})
            row_ids[name] = None
    return row_ids


@dataclass(frozen=True)
class TaskPlan:
    task: str
    row_name: str
    row_id: Optional[int]
    action: Callable[[], Optional[InterceptOutcome]]
    delay_seconds: float = 0.0


def _run_task(plan: TaskPlan) -> TaskReport:
    if plan.delay_seconds > 0:
        time.sleep(plan.delay_seconds)
    try:
        outcome = plan.action()
    except Exception as exc:  # noqa: BLE001 - a failed task must not take its siblings down
        log.exception(
            f"[{plan.row_name}]: {plan.task} failed: {exc}",
            extra={"row": plan.row_name, "task": plan.task},
        )
        return TaskReport(
            task=plan.task, row_name=plan.row_name, row_id=plan.row_id, error=str(exc)
        )
    return TaskReport(
        task=plan.task, row_name=plan.row_name, row_id=plan.row_id, outcome=outcome
    )


def run_experiment(store: RowStore, settings: Optional[Settings] = None) -> ExperimentReport:
    """
    Run the fixed one-writer/two-interceptor experiment and wait for all tasks.

    Parameters
    ----------
    store : RowStore
        Shared handle on the row store; used from three threads at once.
    settings : Settings | None
        Source of ``hold_seconds`` and ``intercept_delay_seconds``. Defaults to
        the cached environment settings.

    Returns
    -------
    ExperimentReport
        Seeded identifiers and one TaskReport per task, in launch order.
    """
    settings = settings or get_settings()
    hold = settings.hold_seconds
    delay = settings.intercept_delay_seconds

    row_ids = _seed_rows(store)
    locked_id = row_ids[LOCKED_ROW]
    free_id = row_ids[FREE_ROW]

    plans = [
        TaskPlan(
            TX_UPDATE,
            LOCKED_ROW,
            locked_id,
            lambda: tx_update(store, locked_id, LOCKED_ROW, hold),
        ),
        # The updater has already set is_set inside its open transaction, so
        # this update waits on the row lock and then matches nothing.
        TaskPlan(
            INTERCEPT,
            LOCKED_ROW,
            locked_id,
            lambda: intercept_row(store, locked_id, LOCKED_ROW),
            delay_seconds=delay,
        ),
        # Nothing holds this row; the update goes through immediately.
        TaskPlan(
            INTERCEPT,
            FREE_ROW,
            free_id,
            lambda: intercept_row(store, free_id, FREE_ROW),
            delay_seconds=delay,
        ),
    ]

    reports: List[Optional[TaskReport]] = [None] * len(plans)

    def _worker(slot: int) -> None:
        reports[slot] = _run_task(plans[slot])

    threads = [
        threading.Thread(target=_worker, args=(slot,), name=f"{plan.task}-{plan.row_name}")
        for slot, plan in enumerate(plans)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    log.info("terminating")
    return ExperimentReport(row_ids=row_ids, tasks=[r for r in reports if r is not None])


__all__ = [
    "FREE_ROW",
    "INTERCEPT",
    "LOCKED_ROW",
    "SEED_NAMES",
    "TX_UPDATE",
    "run_experiment",
]
