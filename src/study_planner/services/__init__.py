"""Application services orchestrating the study document."""

from __future__ import annotations

from .analytics import StudySummary, summarize
from .kanban import KanbanBoard
from .store import StudyStore
from .timer import TaskTimer, TimerState, format_duration

__all__ = [
    "KanbanBoard",
    "StudyStore",
    "StudySummary",
    "TaskTimer",
    "TimerState",
    "format_duration",
    "summarize",
]
