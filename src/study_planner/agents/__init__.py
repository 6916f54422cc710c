"""Suggestion generators consumed by the presentation layer."""

from __future__ import annotations

from .suggestions import (
    MockSuggestionProvider,
    ResourceAnalysis,
    SubtaskSuggestion,
    SuggestionProvider,
    TaskSuggestion,
    apply_subtask_suggestions,
    create_task_from_suggestion,
    title_from_url,
)

__all__ = [
    "MockSuggestionProvider",
    "ResourceAnalysis",
    "SubtaskSuggestion",
    "SuggestionProvider",
    "TaskSuggestion",
    "apply_subtask_suggestions",
    "create_task_from_suggestion",
    "title_from_url",
]
