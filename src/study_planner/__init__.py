"""Study Planner application package."""

from __future__ import annotations

from .services import KanbanBoard, StudyStore, TaskTimer

__all__ = ["KanbanBoard", "StudyStore", "TaskTimer", "main"]


def main() -> int:
    from .cli import main as cli_main

    return cli_main()
