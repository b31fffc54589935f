"""
Domain models for the row-lock interception demo.

Defines the value objects the experiment hands back to its caller. All models
are frozen: they describe what was observed, the store remains the only source
of truth.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# Name written by the interceptor's conditional update.
SENTINEL_NAME = "something else"


class InterceptOutcome(BaseModel):
    """What an interceptor observed: its affected-row count and the row read back."""

    rows_affected: int = Field(..., ge=0, le=1)
    name: str
    is_set: bool

    model_config = {"frozen": True}


class TaskReport(BaseModel):
    """Result of one experiment task."""

    task: str = Field(..., description="Either 'tx_update' or 'intercept'.")
    row_name: str
    row_id: Optional[int] = None
    outcome: Optional[InterceptOutcome] = None
    error: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.error is None


class ExperimentReport(BaseModel):
    """Seeded identifiers and per-task results of one experiment run."""

    row_ids: Dict[str, Optional[int]]
    tasks: List[TaskReport]

    model_config = {"frozen": True}

    def task(self, task: str, row_name: str) -> TaskReport:
        for report in self.tasks:
            if report.task == task and report.row_name == row_name:
                return report
        raise KeyError(f"no {task} task recorded for row '{row_name}'")


__all__ = ["SENTINEL_NAME", "InterceptOutcome", "TaskReport", "ExperimentReport"]
