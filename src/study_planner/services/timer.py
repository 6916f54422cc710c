"""Elapsed-time tracking for a task being worked on."""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..config import get_settings
from ..core.errors import NotFoundError, StudyPlannerError
from .store import StudyStore

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


def format_duration(seconds: int) -> str:
    """Render seconds as ``M:SS`` or ``H:MM:SS`` once an hour is reached."""

    hours, remainder = divmod(max(int(seconds), 0), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


class TaskTimer:
    """Stopwatch that adds whole elapsed seconds to a task's ``time_spent``.

    Time is measured between ``start`` and ``pause`` with a monotonic clock,
    so the timer accumulates nothing while stopped regardless of whether a
    tick loop is still alive. Each pause flushes once. The flush re-reads the
    task from the store, which keeps edits made while the timer was running.
    Use the timer as a context manager, or call ``close``, so a running timer
    is flushed when its host goes away.
    """

    def __init__(
        self,
        store: StudyStore,
        task_id: str,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._task_id = task_id
        self._clock = clock
        self._state = TimerState.STOPPED
        self._started_at: Optional[float] = None
        self._carry = 0.0
        self._closed = False

    def __enter__(self) -> "TaskTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is TimerState.RUNNING

    @property
    def pending_seconds(self) -> int:
        """Whole seconds measured but not yet written to the task."""

        return int(self._measure())

    @property
    def display_seconds(self) -> int:
        task = self._store.find_task(self._task_id)
        base = task.time_spent if task else 0
        return base + self.pending_seconds

    def _measure(self) -> float:
        if self._started_at is None:
            return self._carry
        return self._carry + max(self._clock() - self._started_at, 0.0)

    def start(self) -> None:
        if self._closed:
            raise StudyPlannerError("Timer has been closed.")
        if self.is_running:
            return
        if self._store.find_task(self._task_id) is None:
            raise NotFoundError("Task", self._task_id)
        self._started_at = self._clock()
        self._state = TimerState.RUNNING
        logger.debug("Timer started for task %s", self._task_id)

    def pause(self) -> int:
        """Stop the timer and flush; returns the seconds added to the task."""

        if not self.is_running:
            return 0
        total = self._measure()
        seconds = int(total)
        # A failed flush leaves the timer running with nothing lost.
        if seconds > 0:
            self._flush(seconds)
        self._carry = total - seconds
        self._started_at = None
        self._state = TimerState.STOPPED
        return seconds

    stop = pause

    def close(self) -> int:
        flushed = self.pause()
        self._closed = True
        return flushed

    def _flush(self, seconds: int) -> None:
        task = self._store.find_task(self._task_id)
        if task is None:
            logger.warning("Dropping %ss tracked for deleted task %s", seconds, self._task_id)
            return
        task.time_spent += seconds
        self._store.update_task(task)
        logger.debug("Flushed %ss into task %s (total %ss)", seconds, self._task_id, task.time_spent)

    async def watch(self, on_tick: Callable[[int], None], interval: Optional[float] = None) -> None:
        """Report the displayed total every ``interval`` seconds while running.

        Cancelling the watcher means its host is gone: the timer is closed,
        which flushes whatever was measured.
        """

        delay = interval if interval is not None else get_settings().timer.tick_seconds
        try:
            while self.is_running:
                on_tick(self.display_seconds)
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self.close()
            raise


__all__ = ["TaskTimer", "TimerState", "format_duration"]
