from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .enums import STATUS_ORDER, Difficulty, Priority, TaskStatus


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Older documents stored full ISO timestamps in ``due``.
        return date.fromisoformat(value[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim, drop empty entries and deduplicate while keeping first-seen order."""

    seen: set[str] = set()
    result: List[str] = []
    for tag in tags:
        cleaned = str(tag).strip()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        result.append(cleaned)
    return result


@dataclass(slots=True)
class SubTask:
    id: str
    title: str
    completed: bool = False
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SubTask":
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            completed=bool(record.get("completed", False)),
            created_at=_parse_datetime(record["createdAt"]) if record.get("createdAt") else utc_now(),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class StudyTask:
    id: str
    title: str
    subject: str
    due: date
    status: TaskStatus = TaskStatus.TO_STUDY
    description: str = ""
    time_spent: int = 0
    priority: Priority = Priority.MEDIUM
    difficulty: Difficulty = Difficulty.MEDIUM
    subtasks: List[SubTask] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @property
    def progress(self) -> float:
        """Share of completed subtasks, 0.0 when the task has none."""

        if not self.subtasks:
            return 0.0
        return sum(1 for item in self.subtasks if item.completed) / len(self.subtasks)

    def find_subtask(self, subtask_id: str) -> Optional[SubTask]:
        for subtask in self.subtasks:
            if subtask.id == subtask_id:
                return subtask
        return None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "StudyTask":
        created_at = _parse_datetime(record["createdAt"]) if record.get("createdAt") else utc_now()
        return cls(
            id=str(record["id"]),
            title=str(record["title"]),
            subject=str(record["subject"]),
            due=_parse_date(record["due"]),
            status=TaskStatus(record.get("status") or TaskStatus.TO_STUDY),
            description=record.get("description") or "",
            time_spent=max(int(record.get("timeSpent") or 0), 0),
            priority=Priority(record.get("priority") or Priority.MEDIUM),
            difficulty=Difficulty(record.get("difficulty") or Difficulty.MEDIUM),
            subtasks=[SubTask.from_record(item) for item in record.get("subtasks") or []],
            created_at=created_at,
            updated_at=_parse_datetime(record["updatedAt"]) if record.get("updatedAt") else created_at,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "due": self.due.isoformat(),
            "timeSpent": self.time_spent,
            "status": self.status.value,
            "priority": self.priority.value,
            "difficulty": self.difficulty.value,
            "subtasks": [item.to_record() for item in self.subtasks],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass(slots=True)
class Resource:
    id: str
    url: str
    title: str
    subject: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Resource":
        return cls(
            id=str(record["id"]),
            url=str(record["url"]),
            title=str(record["title"]),
            subject=str(record["subject"]),
            description=record.get("description") or "",
            tags=normalize_tags(record.get("tags") or []),
            created_at=_parse_datetime(record["createdAt"]) if record.get("createdAt") else utc_now(),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(slots=True)
class UserProfile:
    subjects: List[str] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserProfile":
        subjects: List[str] = []
        raw = record.get("subjects") or []
        if not isinstance(raw, list):
            raise TypeError(f"subjects must be a list, got {type(raw).__name__}")
        for name in raw:
            if isinstance(name, str) and name and name not in subjects:
                subjects.append(name)
        return cls(subjects=subjects)

    def to_record(self) -> Dict[str, Any]:
        return {"subjects": list(self.subjects)}


def _empty_buckets() -> Dict[TaskStatus, List[StudyTask]]:
    return {status: [] for status in STATUS_ORDER}


@dataclass(slots=True)
class StudyData:
    """Root aggregate persisted as a single document."""

    user_profile: UserProfile = field(default_factory=UserProfile)
    tasks: Dict[TaskStatus, List[StudyTask]] = field(default_factory=_empty_buckets)
    resources: Dict[str, List[Resource]] = field(default_factory=dict)

    def iter_tasks(self) -> Iterator[StudyTask]:
        for status in STATUS_ORDER:
            yield from self.tasks.get(status, [])

    def iter_resources(self) -> Iterator[Resource]:
        for bucket in self.resources.values():
            yield from bucket

    def to_record(self) -> Dict[str, Any]:
        return {
            "userProfile": self.user_profile.to_record(),
            "tasks": {
                status.value: [task.to_record() for task in self.tasks.get(status, [])]
                for status in STATUS_ORDER
            },
            "resources": {
                subject: [resource.to_record() for resource in bucket]
                for subject, bucket in self.resources.items()
            },
        }


def default_study_data() -> StudyData:
    return StudyData()
