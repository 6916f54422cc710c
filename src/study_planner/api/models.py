from __future__ import annotations

from datetime import date
from typing import Any, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ValidationError
from ..domain import Difficulty, Priority, TaskStatus, normalize_tags

DraftT = TypeVar("DraftT", bound="_Draft")


class _Draft(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    @classmethod
    def parse(cls: Type[DraftT], payload: Union[DraftT, Mapping[str, Any]]) -> DraftT:
        """Build a draft from a mapping, reporting problems as ``ValidationError``."""

        if isinstance(payload, cls):
            return payload
        try:
            return cls.model_validate(dict(payload))
        except PydanticValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'input'}: {error['msg']}"
                for error in exc.errors()
            )
            raise ValidationError(f"Invalid {cls.__name__}: {problems}") from exc


class TaskDraft(_Draft):
    """Input accepted by ``StudyStore.create_task``."""

    title: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    due: date
    description: str = Field(default="")
    status: TaskStatus = Field(default=TaskStatus.TO_STUDY)
    priority: Priority = Field(default=Priority.MEDIUM)
    difficulty: Difficulty = Field(default=Difficulty.MEDIUM)
    time_spent: int = Field(default=0, ge=0, alias="timeSpent")


class ResourceDraft(_Draft):
    """Input accepted by ``StudyStore.create_resource``."""

    url: str = Field(min_length=1)
    title: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    description: str = Field(default="")
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        return normalize_tags(value)
