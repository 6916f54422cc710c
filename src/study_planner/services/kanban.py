"""Drag-and-drop column moves over the study store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Union

from ..core.errors import ValidationError
from ..domain import STATUS_ORDER, StudyTask, TaskStatus
from .store import StudyStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnConfig:
    title: str
    description: str


COLUMN_CONFIG = {
    TaskStatus.TO_STUDY: ColumnConfig("To Study", "Tasks ready to begin"),
    TaskStatus.IN_PROGRESS: ColumnConfig("In Progress", "Currently working on"),
    TaskStatus.REVISION: ColumnConfig("For Revision", "Ready for review"),
    TaskStatus.COMPLETED: ColumnConfig("Completed", "Finished tasks"),
}


@dataclass(frozen=True)
class Column:
    status: TaskStatus
    title: str
    description: str
    count: int


def resolve_drop_target(over_id: Optional[str]) -> Optional[TaskStatus]:
    """Map a drop target identifier to a column, ``None`` when it is not one."""

    if over_id is None:
        return None
    try:
        return TaskStatus(over_id)
    except ValueError:
        return None


class KanbanBoard:
    """Two-phase drag protocol: ``drag_start`` records, ``drag_end`` mutates."""

    def __init__(self, store: StudyStore) -> None:
        self._store = store
        self._active_task_id: Optional[str] = None

    @property
    def active_task_id(self) -> Optional[str]:
        return self._active_task_id

    @property
    def active_task(self) -> Optional[StudyTask]:
        if self._active_task_id is None:
            return None
        return self._store.find_task(self._active_task_id)

    def columns(self) -> List[Column]:
        data = self._store.data
        return [
            Column(
                status=status,
                title=COLUMN_CONFIG[status].title,
                description=COLUMN_CONFIG[status].description,
                count=len(data.tasks[status]),
            )
            for status in STATUS_ORDER
        ]

    def drag_start(self, task_id: str) -> Optional[StudyTask]:
        task = self._store.find_task(task_id)
        self._active_task_id = task.id if task else None
        return task

    def drag_cancel(self) -> None:
        self._active_task_id = None

    def drag_end(self, over_id: Optional[str]) -> Optional[StudyTask]:
        """Finish the gesture; returns the moved task or ``None`` for no mutation."""

        task_id = self._active_task_id
        self._active_task_id = None
        if task_id is None:
            return None
        target = resolve_drop_target(over_id)
        if target is None:
            logger.debug("Drop of %s outside any column ignored", task_id)
            return None
        return self.move(task_id, target)

    def move(self, task_id: str, status: Union[TaskStatus, str]) -> Optional[StudyTask]:
        target = resolve_drop_target(status)
        if target is None:
            raise ValidationError(f"Unknown column: {status!r}")
        task = self._store.find_task(task_id)
        if task is None:
            return None
        if task.status is target:
            return None
        return self._store.update_task(replace(task, status=target))


__all__ = ["COLUMN_CONFIG", "Column", "ColumnConfig", "KanbanBoard", "resolve_drop_target"]
