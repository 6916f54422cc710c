"""Mutation and query API over the study document.

``StudyStore`` is built once per session and handed to every consumer. Each
mutator validates its input first, applies the change to a deep copy of the
current ``StudyData``, swaps the copy in and persists the whole snapshot. A
rejected mutation therefore never leaves the store half updated, and
snapshots handed out earlier through ``data`` are never modified afterwards.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from uuid import uuid4

from ..api.models import ResourceDraft, TaskDraft
from ..config import AppSettings, get_settings
from ..core.errors import NotFoundError, ReferentialViolation, ValidationError
from ..data.storage import LocalStorage, StudyStorage
from ..domain import (
    STATUS_ORDER,
    Difficulty,
    Priority,
    Resource,
    StudyData,
    StudyTask,
    SubTask,
    TaskStatus,
    normalize_tags,
    utc_now,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def _new_id() -> str:
    return str(uuid4())


def _coerce_enum(enum_type: Any, value: Any, field_name: str) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {field_name}: {value!r}") from exc


class StudyStore:
    def __init__(
        self,
        storage: StudyStorage,
        *,
        clock: Clock = utc_now,
        id_factory: IdFactory = _new_id,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._id_factory = id_factory
        self._data = storage.load()

    @classmethod
    def open(cls, settings: Optional[AppSettings] = None) -> "StudyStore":
        """Open the store backed by the configured storage file."""

        resolved = settings or get_settings()
        local = LocalStorage(resolved.storage.data_file)
        return cls(StudyStorage(local, key=resolved.storage.storage_key))

    # Queries -----------------------------------------------------------------

    @property
    def data(self) -> StudyData:
        """Current snapshot. Treat as read-only; mutate through the store."""

        return self._data

    @property
    def storage(self) -> StudyStorage:
        return self._storage

    @property
    def subjects(self) -> List[str]:
        return list(self._data.user_profile.subjects)

    def is_first_run(self) -> bool:
        return not self._data.user_profile.subjects

    def find_task(self, task_id: str) -> Optional[StudyTask]:
        for task in self._data.iter_tasks():
            if task.id == task_id:
                return deepcopy(task)
        return None

    def all_tasks(self) -> List[StudyTask]:
        return [deepcopy(task) for task in self._data.iter_tasks()]

    def tasks_in(self, status: Union[TaskStatus, str]) -> List[StudyTask]:
        bucket = _coerce_enum(TaskStatus, status, "status")
        return [deepcopy(task) for task in self._data.tasks[bucket]]

    def filter_tasks(self, query: str = "", subject: Optional[str] = None) -> Dict[TaskStatus, List[StudyTask]]:
        """Tasks matching ``query`` in title or description, grouped by status."""

        needle = query.strip().lower()
        filtered: Dict[TaskStatus, List[StudyTask]] = {}
        for status in STATUS_ORDER:
            filtered[status] = [
                deepcopy(task)
                for task in self._data.tasks[status]
                if (not needle or needle in task.title.lower() or needle in task.description.lower())
                and (subject is None or task.subject == subject)
            ]
        return filtered

    def find_resource(self, resource_id: str) -> Optional[Resource]:
        for resource in self._data.iter_resources():
            if resource.id == resource_id:
                return deepcopy(resource)
        return None

    def search_resources(self, query: str = "", subject: Optional[str] = None) -> List[Resource]:
        if subject is not None:
            candidates = list(self._data.resources.get(subject, []))
        else:
            candidates = list(self._data.iter_resources())
        needle = query.strip().lower()
        if not needle:
            return [deepcopy(resource) for resource in candidates]
        return [
            deepcopy(resource)
            for resource in candidates
            if needle in resource.title.lower()
            or needle in resource.description.lower()
            or any(needle in tag.lower() for tag in resource.tags)
        ]

    # Internals ---------------------------------------------------------------

    def _now(self) -> datetime:
        return self._clock()

    def _working_copy(self) -> StudyData:
        return deepcopy(self._data)

    def _commit(self, data: StudyData, action: str, **metadata: Any) -> None:
        self._data = data
        logger.debug("Applied %s %s", action, metadata)
        self._storage.save(data)

    def _require_subject(self, subject: str) -> None:
        if subject not in self._data.user_profile.subjects:
            raise ReferentialViolation(subject)

    def _require_task(self, task_id: str) -> StudyTask:
        task = self.find_task(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def _validated_task(self, task: StudyTask) -> StudyTask:
        candidate = deepcopy(task)
        candidate.title = (candidate.title or "").strip()
        if not candidate.title:
            raise ValidationError("Task title must not be empty.")
        if not isinstance(candidate.due, date):
            raise ValidationError("Task due date is required.")
        if isinstance(candidate.due, datetime):
            candidate.due = candidate.due.date()
        if not isinstance(candidate.time_spent, int) or candidate.time_spent < 0:
            raise ValidationError(f"Invalid time spent: {candidate.time_spent!r}")
        if not isinstance(candidate.subtasks, list) or not all(isinstance(item, SubTask) for item in candidate.subtasks):
            raise ValidationError("Task subtasks must be SubTask instances.")
        candidate.status = _coerce_enum(TaskStatus, candidate.status, "status")
        candidate.priority = _coerce_enum(Priority, candidate.priority, "priority")
        candidate.difficulty = _coerce_enum(Difficulty, candidate.difficulty, "difficulty")
        self._require_subject(candidate.subject)
        return candidate

    # Tasks -------------------------------------------------------------------

    def create_task(self, draft: Union[TaskDraft, Mapping[str, Any]]) -> StudyTask:
        parsed = TaskDraft.parse(draft)
        self._require_subject(parsed.subject)
        now = self._now()
        task = StudyTask(
            id=self._id_factory(),
            title=parsed.title,
            description=parsed.description,
            subject=parsed.subject,
            due=parsed.due,
            status=parsed.status,
            time_spent=parsed.time_spent,
            priority=parsed.priority,
            difficulty=parsed.difficulty,
            subtasks=[],
            created_at=now,
            updated_at=now,
        )
        data = self._working_copy()
        data.tasks[task.status].append(task)
        self._commit(data, "create_task", task_id=task.id)
        return deepcopy(task)

    def update_task(self, task: StudyTask) -> StudyTask:
        """Replace a task and place it in the bucket matching its status.

        The task is removed from every bucket before being re-inserted, so a
        call that changes ``status`` together with other fields still leaves
        it in exactly one bucket. ``updated_at`` is always refreshed.
        """

        candidate = self._validated_task(task)
        existing = self._require_task(candidate.id)
        candidate.created_at = existing.created_at
        candidate.updated_at = max(self._now(), existing.created_at)

        data = self._working_copy()
        position: Optional[int] = None
        for status in STATUS_ORDER:
            bucket = data.tasks[status]
            for index, item in enumerate(bucket):
                if item.id == candidate.id and status is candidate.status:
                    position = index
            data.tasks[status] = [item for item in bucket if item.id != candidate.id]
        target = data.tasks[candidate.status]
        if position is None:
            target.append(candidate)
        else:
            target.insert(position, candidate)

        self._commit(data, "update_task", task_id=candidate.id, status=candidate.status.value)
        return deepcopy(candidate)

    def delete_task(self, task_id: str) -> bool:
        if self.find_task(task_id) is None:
            return False
        data = self._working_copy()
        for status in STATUS_ORDER:
            data.tasks[status] = [item for item in data.tasks[status] if item.id != task_id]
        self._commit(data, "delete_task", task_id=task_id)
        return True

    # Subtasks ----------------------------------------------------------------

    def add_subtask(self, task_id: str, title: str) -> SubTask:
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValidationError("Subtask title must not be empty.")
        task = self._require_task(task_id)
        subtask = SubTask(id=self._id_factory(), title=cleaned, completed=False, created_at=self._now())
        task.subtasks.append(subtask)
        self.update_task(task)
        return deepcopy(subtask)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> SubTask:
        task = self._require_task(task_id)
        subtask = task.find_subtask(subtask_id)
        if subtask is None:
            raise NotFoundError("Subtask", subtask_id)
        subtask.completed = not subtask.completed
        self.update_task(task)
        return deepcopy(subtask)

    def delete_subtask(self, task_id: str, subtask_id: str) -> bool:
        task = self._require_task(task_id)
        remaining = [item for item in task.subtasks if item.id != subtask_id]
        if len(remaining) == len(task.subtasks):
            return False
        task.subtasks = remaining
        self.update_task(task)
        return True

    # Resources ---------------------------------------------------------------

    def create_resource(self, draft: Union[ResourceDraft, Mapping[str, Any]]) -> Resource:
        parsed = ResourceDraft.parse(draft)
        self._require_subject(parsed.subject)
        resource = Resource(
            id=self._id_factory(),
            url=parsed.url,
            title=parsed.title,
            description=parsed.description,
            subject=parsed.subject,
            tags=list(parsed.tags),
            created_at=self._now(),
        )
        data = self._working_copy()
        data.resources.setdefault(resource.subject, []).append(resource)
        self._commit(data, "create_resource", resource_id=resource.id)
        return deepcopy(resource)

    def update_resource(self, resource: Resource) -> Resource:
        """Replace a resource, moving it to another subject bucket when needed."""

        candidate = deepcopy(resource)
        candidate.url = (candidate.url or "").strip()
        candidate.title = (candidate.title or "").strip()
        if not candidate.url or not candidate.title:
            raise ValidationError("Resource url and title must not be empty.")
        candidate.tags = normalize_tags(candidate.tags)
        self._require_subject(candidate.subject)
        existing = self.find_resource(candidate.id)
        if existing is None:
            raise NotFoundError("Resource", candidate.id)
        candidate.created_at = existing.created_at

        data = self._working_copy()
        if existing.subject == candidate.subject:
            bucket = data.resources[candidate.subject]
            data.resources[candidate.subject] = [
                candidate if item.id == candidate.id else item for item in bucket
            ]
        else:
            data.resources[existing.subject] = [
                item for item in data.resources[existing.subject] if item.id != candidate.id
            ]
            data.resources.setdefault(candidate.subject, []).append(candidate)
        self._commit(data, "update_resource", resource_id=candidate.id, subject=candidate.subject)
        return deepcopy(candidate)

    def delete_resource(self, resource_id: str) -> bool:
        if self.find_resource(resource_id) is None:
            return False
        data = self._working_copy()
        for subject, bucket in data.resources.items():
            data.resources[subject] = [item for item in bucket if item.id != resource_id]
        self._commit(data, "delete_resource", resource_id=resource_id)
        return True

    # Subjects ----------------------------------------------------------------

    def add_subject(self, name: str) -> bool:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Subject name must not be empty.")
        if cleaned in self._data.user_profile.subjects:
            return False
        data = self._working_copy()
        data.user_profile.subjects.append(cleaned)
        data.resources.setdefault(cleaned, [])
        self._commit(data, "add_subject", subject=cleaned)
        return True

    def remove_subject(self, name: str) -> bool:
        """Remove a subject together with every task and resource using it.

        The cascade is irreversible; confirmation belongs to the caller.
        """

        name = (name or "").strip()
        if name not in self._data.user_profile.subjects:
            return False
        data = self._working_copy()
        data.user_profile.subjects = [item for item in data.user_profile.subjects if item != name]
        removed_tasks = 0
        for status in STATUS_ORDER:
            kept = [task for task in data.tasks[status] if task.subject != name]
            removed_tasks += len(data.tasks[status]) - len(kept)
            data.tasks[status] = kept
        removed_resources = len(data.resources.pop(name, []))
        for subject, bucket in data.resources.items():
            data.resources[subject] = [item for item in bucket if item.subject != name]
        logger.info(
            "Removed subject %r with %d task(s) and %d resource(s)", name, removed_tasks, removed_resources
        )
        self._commit(data, "remove_subject", subject=name)
        return True


__all__ = ["StudyStore"]
