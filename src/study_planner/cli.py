from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from .bootstrap import configure_logging
from .core.errors import ValidationError
from .domain import Difficulty, Priority, TaskStatus
from .agents import title_from_url
from .services import KanbanBoard, StudyStore, format_duration, summarize

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Study Planner command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subjects = subparsers.add_parser("subjects", help="Manage declared subjects.")
    subjects_sub = subjects.add_subparsers(dest="action", required=True)
    subjects_sub.add_parser("list", help="List subjects.")
    add_subject = subjects_sub.add_parser("add", help="Declare a subject.")
    add_subject.add_argument("name")
    remove_subject = subjects_sub.add_parser("remove", help="Remove a subject with its tasks and resources.")
    remove_subject.add_argument("name")
    remove_subject.add_argument("--yes", action="store_true", help="Confirm the cascading delete.")

    tasks = subparsers.add_parser("tasks", help="Manage study tasks.")
    tasks_sub = tasks.add_subparsers(dest="action", required=True)
    list_tasks = tasks_sub.add_parser("list", help="Show the board.")
    list_tasks.add_argument("--subject")
    list_tasks.add_argument("--query", default="")
    add_task = tasks_sub.add_parser("add", help="Create a task.")
    add_task.add_argument("title")
    add_task.add_argument("--subject", required=True)
    add_task.add_argument("--due", required=True, help="Due date, YYYY-MM-DD.")
    add_task.add_argument("--description", default="")
    add_task.add_argument("--status", choices=[status.value for status in TaskStatus], default=TaskStatus.TO_STUDY.value)
    add_task.add_argument("--priority", choices=[item.value for item in Priority], default=Priority.MEDIUM.value)
    add_task.add_argument("--difficulty", choices=[item.value for item in Difficulty], default=Difficulty.MEDIUM.value)
    move_task = tasks_sub.add_parser("move", help="Move a task to another column.")
    move_task.add_argument("task_id")
    move_task.add_argument("status", choices=[status.value for status in TaskStatus])
    delete_task = tasks_sub.add_parser("delete", help="Delete a task.")
    delete_task.add_argument("task_id")
    add_subtask = tasks_sub.add_parser("subtask", help="Add a subtask to a task.")
    add_subtask.add_argument("task_id")
    add_subtask.add_argument("title")
    toggle_subtask = tasks_sub.add_parser("toggle", help="Toggle a subtask.")
    toggle_subtask.add_argument("task_id")
    toggle_subtask.add_argument("subtask_id")

    resources = subparsers.add_parser("resources", help="Manage the resource library.")
    resources_sub = resources.add_subparsers(dest="action", required=True)
    list_resources = resources_sub.add_parser("list", help="Search resources.")
    list_resources.add_argument("--subject")
    list_resources.add_argument("--query", default="")
    add_resource = resources_sub.add_parser("add", help="Bookmark a resource.")
    add_resource.add_argument("url")
    add_resource.add_argument("--subject", required=True)
    add_resource.add_argument("--title")
    add_resource.add_argument("--description", default="")
    add_resource.add_argument("--tag", action="append", default=[], dest="tags")
    delete_resource = resources_sub.add_parser("delete", help="Delete a resource.")
    delete_resource.add_argument("resource_id")

    subparsers.add_parser("stats", help="Show study statistics.")

    return parser


def _subjects(store: StudyStore, args: argparse.Namespace) -> int:
    if args.action == "list":
        if store.is_first_run():
            print("No subjects yet. Suggested: " + ", ".join(store.storage.default_subjects()))
        for name in store.subjects:
            print(name)
    elif args.action == "add":
        added = store.add_subject(args.name)
        print(f"Added {args.name.strip()}" if added else f"{args.name.strip()} already exists")
    elif args.action == "remove":
        if not args.yes:
            print("Removing a subject deletes its tasks and resources. Re-run with --yes to confirm.")
            return 1
        removed = store.remove_subject(args.name)
        print(f"Removed {args.name}" if removed else f"No subject named {args.name}")
    return 0


def _tasks(store: StudyStore, args: argparse.Namespace) -> int:
    board = KanbanBoard(store)
    if args.action == "list":
        filtered = store.filter_tasks(args.query, args.subject)
        for column in board.columns():
            print(f"== {column.title} ({column.count})")
            for task in filtered[column.status]:
                done = sum(1 for item in task.subtasks if item.completed)
                print(
                    f"  {task.id}  {task.title} [{task.subject}] due {task.due.isoformat()} "
                    f"{task.priority.value} {format_duration(task.time_spent)} {done}/{len(task.subtasks)}"
                )
    elif args.action == "add":
        task = store.create_task(
            {
                "title": args.title,
                "subject": args.subject,
                "due": args.due,
                "description": args.description,
                "status": args.status,
                "priority": args.priority,
                "difficulty": args.difficulty,
            }
        )
        print(task.id)
    elif args.action == "move":
        moved = board.move(args.task_id, args.status)
        print(f"Moved to {moved.status.value}" if moved else "Nothing to move")
    elif args.action == "delete":
        print("Deleted" if store.delete_task(args.task_id) else "Not found")
    elif args.action == "subtask":
        print(store.add_subtask(args.task_id, args.title).id)
    elif args.action == "toggle":
        subtask = store.toggle_subtask(args.task_id, args.subtask_id)
        print("done" if subtask.completed else "open")
    return 0


def _resources(store: StudyStore, args: argparse.Namespace) -> int:
    if args.action == "list":
        for resource in store.search_resources(args.query, args.subject):
            tags = ", ".join(resource.tags)
            print(f"{resource.id}  {resource.title} <{resource.url}> [{resource.subject}] {tags}")
    elif args.action == "add":
        resource = store.create_resource(
            {
                "url": args.url,
                "title": args.title or title_from_url(args.url),
                "description": args.description,
                "subject": args.subject,
                "tags": args.tags,
            }
        )
        print(resource.id)
    elif args.action == "delete":
        print("Deleted" if store.delete_resource(args.resource_id) else "Not found")
    return 0


def _stats(store: StudyStore, args: argparse.Namespace) -> int:
    summary = summarize(store.data)
    print(f"Tasks: {summary.total_tasks} ({summary.completed_tasks} completed, {summary.completion_rate:.0f}%)")
    print(f"Study time: {format_duration(summary.total_study_time)} (today {format_duration(summary.today_study_time)})")
    print(f"Streak: {summary.current_streak} day(s)")
    for stats in summary.subjects:
        print(f"  {stats.subject}: {stats.completed}/{stats.total} {format_duration(stats.time_spent)}")
    return 0


HANDLERS: Dict[str, Callable[[StudyStore, argparse.Namespace], int]] = {
    "subjects": _subjects,
    "tasks": _tasks,
    "resources": _resources,
    "stats": _stats,
}


def main(argv: Optional[List[str]] = None, store: Optional[StudyStore] = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("Study Planner CLI running %s", args.command)
    resolved = store or StudyStore.open()
    try:
        return HANDLERS[args.command](resolved, args)
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
