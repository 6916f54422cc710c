"""Core configuration, constants and error types."""

from .config import APP_NAME, DATA_DIR, DEFAULT_SUBJECTS, STORAGE_FILE, STORAGE_KEY, ensure_data_dir
from .errors import NotFoundError, PersistenceError, ReferentialViolation, StudyPlannerError, ValidationError

__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "DEFAULT_SUBJECTS",
    "STORAGE_FILE",
    "STORAGE_KEY",
    "ensure_data_dir",
    "NotFoundError",
    "PersistenceError",
    "ReferentialViolation",
    "StudyPlannerError",
    "ValidationError",
]
