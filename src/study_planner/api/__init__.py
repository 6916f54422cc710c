"""Validated input payloads accepted by the store mutators."""

from __future__ import annotations

from .models import ResourceDraft, TaskDraft

__all__ = ["ResourceDraft", "TaskDraft"]
