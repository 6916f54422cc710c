"""Data access layer."""

from __future__ import annotations

from .storage import LocalStorage, StudyStorage, study_data_from_record

__all__ = ["LocalStorage", "StudyStorage", "study_data_from_record"]
