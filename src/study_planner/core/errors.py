"""Error taxonomy shared by the store, the storage adapter and the CLI."""

from __future__ import annotations


class StudyPlannerError(Exception):
    """Base class for every error raised by the study planner."""


class ValidationError(StudyPlannerError):
    """Raised when a mutator receives input it cannot apply.

    The store checks input before touching its data, so a caller that catches
    this error can rely on nothing having changed.
    """


class ReferentialViolation(ValidationError):
    """Raised when a task or resource references an undeclared subject."""

    def __init__(self, subject: str) -> None:
        super().__init__(f"Unknown subject: {subject!r}")
        self.subject = subject


class NotFoundError(ValidationError):
    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} {identifier!r} not found.")
        self.kind = kind
        self.identifier = identifier


class PersistenceError(StudyPlannerError):
    """Storage read or write failure; recovered inside the storage adapter."""
