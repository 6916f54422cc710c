from __future__ import annotations

from pathlib import Path
from typing import List

from platformdirs import user_data_dir

APP_NAME = "Study Planner"
APP_AUTHOR = "StudyPlanner"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
STORAGE_FILE = DATA_DIR / "storage.json"
STORAGE_KEY = "study_planner_data"

DEFAULT_SUBJECTS: List[str] = [
    "Computer Science",
    "Mathematics",
    "Physics",
    "Chemistry",
    "Biology",
    "History",
    "Literature",
    "Languages",
]


def ensure_data_dir(path: Path = DATA_DIR) -> None:
    path.mkdir(parents=True, exist_ok=True)
