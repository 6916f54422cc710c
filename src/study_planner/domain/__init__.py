"""Domain models for study planning."""

from __future__ import annotations

from .enums import STATUS_ORDER, Difficulty, Priority, TaskStatus
from .models import Resource, StudyData, StudyTask, SubTask, UserProfile, default_study_data, normalize_tags, utc_now

__all__ = [
    "STATUS_ORDER",
    "Difficulty",
    "Priority",
    "Resource",
    "StudyData",
    "StudyTask",
    "SubTask",
    "TaskStatus",
    "UserProfile",
    "default_study_data",
    "normalize_tags",
    "utc_now",
]
