from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    TO_STUDY = "toStudy"
    IN_PROGRESS = "inProgress"
    REVISION = "revision"
    COMPLETED = "completed"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


STATUS_ORDER = tuple(TaskStatus)
