from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core.config import DATA_DIR, STORAGE_FILE, STORAGE_KEY

load_dotenv()


@dataclass(frozen=True)
class StorageSettings:
    data_file: Path
    storage_key: str


@dataclass(frozen=True)
class TimerSettings:
    tick_seconds: float


@dataclass(frozen=True)
class SuggestionSettings:
    delay_seconds: float


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_dir: Path


@dataclass(frozen=True)
class AppSettings:
    storage: StorageSettings
    timer: TimerSettings
    suggestions: SuggestionSettings
    logging: LoggingSettings


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _path_from_env(name: str, default: Path) -> Path:
    raw: Optional[str] = os.getenv(name)
    return Path(raw).expanduser() if raw else default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    storage = StorageSettings(
        data_file=_path_from_env("STUDY_PLANNER_DATA_FILE", STORAGE_FILE),
        storage_key=os.getenv("STUDY_PLANNER_STORAGE_KEY", STORAGE_KEY),
    )

    timer = TimerSettings(
        tick_seconds=_float_from_env("STUDY_PLANNER_TIMER_TICK_SECONDS", 1.0) or 1.0,
    )

    suggestions = SuggestionSettings(
        delay_seconds=_float_from_env("STUDY_PLANNER_SUGGESTION_DELAY_SECONDS", 1.5),
    )

    logging = LoggingSettings(
        level=os.getenv("STUDY_PLANNER_LOG_LEVEL", "INFO").upper(),
        log_dir=_path_from_env("STUDY_PLANNER_LOG_DIR", DATA_DIR / "logs"),
    )

    return AppSettings(storage=storage, timer=timer, suggestions=suggestions, logging=logging)
