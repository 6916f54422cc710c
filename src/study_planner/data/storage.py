"""Durable storage for the study document.

``LocalStorage`` is a tiny key-value slot backed by one JSON file.
``StudyStorage`` keeps the whole ``StudyData`` snapshot under a single key of
that slot and is deliberately forgiving: a missing or unreadable document
loads as the empty default, and a failed write is logged rather than raised.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from ..core.config import DEFAULT_SUBJECTS, STORAGE_KEY, ensure_data_dir
from ..core.errors import PersistenceError
from ..domain import STATUS_ORDER, Resource, StudyData, StudyTask, TaskStatus, UserProfile, default_study_data

logger = logging.getLogger(__name__)


class LocalStorage:
    """JSON file holding a ``{key: string}`` mapping."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            raise PersistenceError(f"Unable to read {self._path}") from exc
        if not raw.strip():
            return {}
        try:
            payload = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise PersistenceError(f"{self._path} is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise PersistenceError(f"{self._path} does not hold a key-value mapping")
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _write(self, items: Dict[str, str]) -> None:
        payload = orjson.dumps(items, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            ensure_data_dir(self._path.parent)
            tmp_path.write_bytes(payload + b"\n")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write {self._path}") from exc

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read()
        except PersistenceError:
            logger.warning("Discarding unreadable storage file %s", self._path)
            items = {}
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)


def _load_tasks(raw: Any, subjects: List[str]) -> Dict[TaskStatus, List[StudyTask]]:
    buckets = default_study_data().tasks
    if not isinstance(raw, dict):
        return buckets
    seen: set[str] = set()
    for status in STATUS_ORDER:
        records = raw.get(status.value) or []
        if not isinstance(records, list):
            logger.warning("Ignoring non-list task bucket %s", status.value)
            continue
        for record in records:
            try:
                task = StudyTask.from_record(record)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed task record in %s: %s", status.value, exc)
                continue
            if not task.title.strip():
                logger.warning("Skipping task %s with a blank title", task.id)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task %s found in %s", task.id, status.value)
                continue
            if task.subject not in subjects:
                logger.warning("Dropping task %s referencing unknown subject %r", task.id, task.subject)
                continue
            # Bucket membership is authoritative for the status.
            task.status = status
            seen.add(task.id)
            buckets[status].append(task)
    return buckets


def _load_resources(raw: Any, subjects: List[str]) -> Dict[str, List[Resource]]:
    resources: Dict[str, List[Resource]] = {}
    if not isinstance(raw, dict):
        return resources
    for subject, records in raw.items():
        if subject not in subjects:
            logger.warning("Dropping resource bucket for unknown subject %r", subject)
            continue
        records = records or []
        if not isinstance(records, list):
            logger.warning("Ignoring non-list resource bucket for %r", subject)
            records = []
        bucket: List[Resource] = []
        for record in records:
            try:
                resource = Resource.from_record({**record, "subject": subject})
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed resource record in %r: %s", subject, exc)
                continue
            bucket.append(resource)
        resources[subject] = bucket
    return resources


def study_data_from_record(payload: Dict[str, Any]) -> StudyData:
    """Merge a stored document field by field against the empty default."""

    profile_raw = payload.get("userProfile")
    try:
        profile = UserProfile.from_record(profile_raw if isinstance(profile_raw, dict) else {})
    except TypeError as exc:
        logger.warning("Ignoring malformed user profile: %s", exc)
        profile = UserProfile()
    return StudyData(
        user_profile=profile,
        tasks=_load_tasks(payload.get("tasks"), profile.subjects),
        resources=_load_resources(payload.get("resources"), profile.subjects),
    )


class StudyStorage:
    """Load and save the ``StudyData`` snapshot under one well-known key."""

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> StudyData:
        try:
            raw = self._storage.get_item(self._key)
        except PersistenceError as exc:
            logger.warning("Error loading study data, using defaults: %s", exc)
            return default_study_data()
        if raw is None:
            return default_study_data()
        try:
            payload = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            logger.warning("Stored study data is malformed, using defaults: %s", exc)
            return default_study_data()
        if not isinstance(payload, dict):
            logger.warning("Stored study data is not an object, using defaults")
            return default_study_data()
        return study_data_from_record(payload)

    def save(self, data: StudyData) -> bool:
        try:
            serialized = orjson.dumps(data.to_record()).decode("utf-8")
            self._storage.set_item(self._key, serialized)
        except (PersistenceError, AttributeError, TypeError, ValueError) as exc:
            logger.error("Error saving study data: %s", exc, exc_info=True)
            return False
        return True

    def is_first_run(self) -> bool:
        return not self.load().user_profile.subjects

    @staticmethod
    def default_subjects() -> List[str]:
        return list(DEFAULT_SUBJECTS)


__all__ = ["LocalStorage", "StudyStorage", "study_data_from_record"]
