from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from ..domain import Priority, StudyData, TaskStatus, utc_now

STREAK_WINDOW_DAYS = 30


@dataclass(frozen=True)
class SubjectStats:
    subject: str
    total: int
    completed: int
    completion_rate: float
    time_spent: int


@dataclass(frozen=True)
class PriorityStats:
    priority: Priority
    count: int
    completed: int


@dataclass(frozen=True)
class DayStats:
    day: date
    completed: int
    hours: float


@dataclass(frozen=True)
class StudySummary:
    total_tasks: int
    completed_tasks: int
    in_progress: int
    completion_rate: float
    total_study_time: int
    average_session_time: float
    today_study_time: int
    current_streak: int
    subjects: List[SubjectStats] = field(default_factory=list)
    priorities: List[PriorityStats] = field(default_factory=list)
    last_seven_days: List[DayStats] = field(default_factory=list)


def _rate(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0.0


def summarize(data: StudyData, today: Optional[date] = None) -> StudySummary:
    """Aggregate counts and study time over a snapshot.

    Completion days are read from ``updated_at`` of completed tasks, the same
    approximation the board uses for its streak counter.
    """

    reference = today or utc_now().date()
    tasks = list(data.iter_tasks())
    completed = data.tasks[TaskStatus.COMPLETED]
    total_time = sum(task.time_spent for task in tasks)
    completion_days = [task.updated_at.date() for task in completed]

    subjects = []
    for subject in data.user_profile.subjects:
        subject_tasks = [task for task in tasks if task.subject == subject]
        done = sum(1 for task in subject_tasks if task.status is TaskStatus.COMPLETED)
        subjects.append(
            SubjectStats(
                subject=subject,
                total=len(subject_tasks),
                completed=done,
                completion_rate=_rate(done, len(subject_tasks)),
                time_spent=sum(task.time_spent for task in subject_tasks),
            )
        )

    priorities = [
        PriorityStats(
            priority=priority,
            count=sum(1 for task in tasks if task.priority is priority),
            completed=sum(1 for task in completed if task.priority is priority),
        )
        for priority in (Priority.URGENT, Priority.HIGH, Priority.MEDIUM, Priority.LOW)
    ]

    last_seven_days = []
    for offset in range(6, -1, -1):
        day = reference - timedelta(days=offset)
        day_tasks = [task for task in completed if task.updated_at.date() == day]
        last_seven_days.append(
            DayStats(day=day, completed=len(day_tasks), hours=sum(task.time_spent for task in day_tasks) / 3600)
        )

    streak = 0
    for offset in range(STREAK_WINDOW_DAYS):
        if reference - timedelta(days=offset) in completion_days:
            streak += 1
        elif offset > 0:
            break

    return StudySummary(
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        in_progress=len(data.tasks[TaskStatus.IN_PROGRESS]),
        completion_rate=_rate(len(completed), len(tasks)),
        total_study_time=total_time,
        average_session_time=total_time / len(completed) if completed else 0.0,
        today_study_time=sum(task.time_spent for task in tasks if task.updated_at.date() == reference),
        current_streak=streak,
        subjects=subjects,
        priorities=priorities,
        last_seven_days=last_seven_days,
    )


__all__ = ["DayStats", "PriorityStats", "StudySummary", "SubjectStats", "summarize"]
