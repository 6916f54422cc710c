"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, LoggingSettings, StorageSettings, SuggestionSettings, TimerSettings, get_settings

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "StorageSettings",
    "SuggestionSettings",
    "TimerSettings",
    "get_settings",
]
