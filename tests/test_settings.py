from pathlib import Path

import pytest

from study_planner.config import get_settings
from study_planner.core.config import STORAGE_FILE, STORAGE_KEY


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in (
        "STUDY_PLANNER_DATA_FILE",
        "STUDY_PLANNER_STORAGE_KEY",
        "STUDY_PLANNER_TIMER_TICK_SECONDS",
        "STUDY_PLANNER_SUGGESTION_DELAY_SECONDS",
        "STUDY_PLANNER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = get_settings()
    assert settings.storage.data_file == STORAGE_FILE
    assert settings.storage.storage_key == STORAGE_KEY == "study_planner_data"
    assert settings.timer.tick_seconds == 1.0
    assert settings.suggestions.delay_seconds == 1.5
    assert settings.logging.level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("STUDY_PLANNER_DATA_FILE", str(tmp_path / "planner.json"))
    monkeypatch.setenv("STUDY_PLANNER_STORAGE_KEY", "other")
    monkeypatch.setenv("STUDY_PLANNER_SUGGESTION_DELAY_SECONDS", "0")
    monkeypatch.setenv("STUDY_PLANNER_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.storage.data_file == Path(tmp_path / "planner.json")
    assert settings.storage.storage_key == "other"
    assert settings.suggestions.delay_seconds == 0.0
    assert settings.logging.level == "DEBUG"


@pytest.mark.parametrize("raw", ["soon", "-2", "0"])
def test_invalid_tick_falls_back(monkeypatch, raw):
    monkeypatch.setenv("STUDY_PLANNER_TIMER_TICK_SECONDS", raw)
    assert get_settings().timer.tick_seconds == 1.0
