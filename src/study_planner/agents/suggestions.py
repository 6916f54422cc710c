"""Canned study suggestions and helpers that apply them through the store.

The provider is an injected capability: anything implementing
``SuggestionProvider`` can replace ``MockSuggestionProvider``. Callers decide
whether to retry a failed suggestion call; the store treats applied
suggestions as ordinary task and subtask input.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, TypedDict
from urllib.parse import urlparse
from uuid import uuid4

from langchain_core.runnables import RunnableLambda
from langgraph.graph import END, StateGraph

from ..config import get_settings
from ..core.errors import NotFoundError
from ..domain import Difficulty, Priority, StudyTask, SubTask, TaskStatus
from ..services.store import StudyStore

FALLBACK_SUBJECT = "General"


@dataclass(frozen=True)
class SubtaskSuggestion:
    title: str
    description: str
    estimated_minutes: int
    difficulty: Difficulty


@dataclass(frozen=True)
class TaskSuggestion:
    title: str
    description: str
    subject: str
    priority: Priority
    difficulty: Difficulty
    estimated_days: int


@dataclass(frozen=True)
class ResourceAnalysis:
    title: str
    description: str
    tags: List[str]


class SuggestionProvider(Protocol):
    async def suggest_subtasks(self, task: StudyTask, prompt: str = "") -> List[SubtaskSuggestion]: ...

    async def suggest_tasks(self, prompt: str, subjects: Sequence[str]) -> List[TaskSuggestion]: ...

    async def analyze_resource(self, url: str, content: str = "") -> ResourceAnalysis: ...


class SuggestionState(TypedDict, total=False):
    kind: str
    request: Dict[str, object]
    topic: str
    suggestions: List[object]


def _ingest_node(state: SuggestionState) -> SuggestionState:
    request = state.get("request", {})
    state["topic"] = str(request.get("prompt") or request.get("title") or "").strip()
    return state


def _subtasks(request: Dict[str, object]) -> List[SubtaskSuggestion]:
    subject = request.get("subject", "")
    title = request.get("title", "")
    return [
        SubtaskSuggestion(
            f"Research fundamentals of {subject}",
            f"Gather basic information and key concepts for {title}",
            30,
            Difficulty.EASY,
        ),
        SubtaskSuggestion(
            "Create outline and structure", "Organize main points and create a logical flow", 20, Difficulty.MEDIUM
        ),
        SubtaskSuggestion(
            "Deep dive into core concepts", "Study the most important aspects in detail", 45, Difficulty.HARD
        ),
        SubtaskSuggestion(
            "Practice exercises and examples", "Apply knowledge through practical exercises", 60, Difficulty.MEDIUM
        ),
        SubtaskSuggestion(
            "Review and summarize", "Create summary notes and identify key takeaways", 25, Difficulty.EASY
        ),
    ]


def _tasks(topic: str, subjects: Sequence[str]) -> List[TaskSuggestion]:
    if not topic:
        return []
    subject = subjects[0] if subjects else FALLBACK_SUBJECT
    return [
        TaskSuggestion(
            f"Study {topic}",
            f"Complete comprehensive study session on {topic} topics",
            subject,
            Priority.MEDIUM,
            Difficulty.MEDIUM,
            2,
        ),
        TaskSuggestion(
            f"Practice exercises for {topic}",
            "Work through practice problems and examples",
            subject,
            Priority.HIGH,
            Difficulty.HARD,
            1,
        ),
        TaskSuggestion(
            f"Review {topic} concepts", "Review and consolidate understanding", subject, Priority.LOW, Difficulty.EASY, 1
        ),
    ]


def _build_node(state: SuggestionState) -> SuggestionState:
    request = state.get("request", {})
    kind = state.get("kind")
    if kind == "subtasks":
        state["suggestions"] = list(_subtasks(request))
    elif kind == "tasks":
        subjects = request.get("subjects") or []
        state["suggestions"] = list(_tasks(state.get("topic", ""), list(subjects)))
    elif kind == "resource":
        state["suggestions"] = [
            ResourceAnalysis(
                title="Machine Learning Fundamentals Tutorial",
                description=(
                    "Comprehensive guide covering supervised and unsupervised learning algorithms "
                    "with practical examples."
                ),
                tags=["machine-learning", "tutorial", "algorithms"],
            )
        ]
    else:
        raise ValueError(f"Unknown suggestion kind: {kind!r}")
    return state


graph = StateGraph(SuggestionState)
graph.add_node("ingest", RunnableLambda(_ingest_node))
graph.add_node("build", RunnableLambda(_build_node))
graph.set_entry_point("ingest")
graph.add_edge("ingest", "build")
graph.add_edge("build", END)
suggestion_graph = graph.compile()


@dataclass
class MockSuggestionProvider:
    """Deterministic provider that waits ``delay_seconds`` before answering."""

    delay_seconds: Optional[float] = None
    graph = suggestion_graph

    async def _run(self, kind: str, request: Dict[str, object]) -> List[object]:
        delay = self.delay_seconds if self.delay_seconds is not None else get_settings().suggestions.delay_seconds
        if delay > 0:
            await asyncio.sleep(delay)
        result: SuggestionState = await self.graph.ainvoke({"kind": kind, "request": request})
        return list(result.get("suggestions", []))

    async def suggest_subtasks(self, task: StudyTask, prompt: str = "") -> List[SubtaskSuggestion]:
        request = {"title": task.title, "subject": task.subject, "prompt": prompt}
        return await self._run("subtasks", request)  # type: ignore[return-value]

    async def suggest_tasks(self, prompt: str, subjects: Sequence[str]) -> List[TaskSuggestion]:
        return await self._run("tasks", {"prompt": prompt, "subjects": list(subjects)})  # type: ignore[return-value]

    async def analyze_resource(self, url: str, content: str = "") -> ResourceAnalysis:
        results = await self._run("resource", {"url": url, "content": content})
        return results[0]  # type: ignore[return-value]


def title_from_url(url: str) -> str:
    """Default resource title derived from the URL host."""

    host = urlparse(url.strip()).hostname
    if not host:
        return "New Resource"
    return f"Resource from {host.replace('www.', '', 1)}"


def apply_subtask_suggestions(
    store: StudyStore, task_id: str, suggestions: Iterable[SubtaskSuggestion]
) -> StudyTask:
    """Append suggestions to a task as open subtasks in a single update."""

    task = store.find_task(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    for suggestion in suggestions:
        task.subtasks.append(SubTask(id=str(uuid4()), title=suggestion.title))
    return store.update_task(task)


def create_task_from_suggestion(
    store: StudyStore, suggestion: TaskSuggestion, today: Optional[date] = None
) -> StudyTask:
    due = (today or date.today()) + timedelta(days=suggestion.estimated_days)
    return store.create_task(
        {
            "title": suggestion.title,
            "description": suggestion.description,
            "subject": suggestion.subject,
            "due": due,
            "status": TaskStatus.TO_STUDY,
            "priority": suggestion.priority,
            "difficulty": suggestion.difficulty,
        }
    )


__all__ = [
    "MockSuggestionProvider",
    "ResourceAnalysis",
    "SubtaskSuggestion",
    "SuggestionProvider",
    "TaskSuggestion",
    "apply_subtask_suggestions",
    "create_task_from_suggestion",
    "suggestion_graph",
    "title_from_url",
]
