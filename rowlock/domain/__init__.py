"""
Domain package for the row-lock interception demo.

Exports the report value objects used by the experiment and
its orchestrator. Keep this package focused on data definitions.
"""

from rowlock.domain.models import (
    SENTINEL_NAME,
    ExperimentReport,
    InterceptOutcome,
    TaskReport,
)

__all__ = [
    "SENTINEL_NAME",
    "ExperimentReport",
    "InterceptOutcome",
    "TaskReport",
]
