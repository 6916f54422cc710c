import pytest

from study_planner import cli
from study_planner.domain import TaskStatus


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda: None)


def run(store, *argv):
    return cli.main(list(argv), store=store)


def test_subjects_list_suggests_defaults_on_first_run(store, capsys):
    assert run(store, "subjects", "list") == 0
    out = capsys.readouterr().out
    assert out.startswith("No subjects yet. Suggested: Computer Science, Mathematics")


def test_subjects_add_and_duplicate(store, capsys):
    assert run(store, "subjects", "add", "Math") == 0
    assert run(store, "subjects", "add", " Math ") == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["Added Math", "Math already exists"]
    assert store.subjects == ["Math"]


def test_subject_removal_requires_confirmation(math_store, capsys):
    assert run(math_store, "subjects", "remove", "Math") == 1
    assert math_store.subjects == ["Math"]
    assert run(math_store, "subjects", "remove", "Math", "--yes") == 0
    assert math_store.subjects == []
    assert "Removed Math" in capsys.readouterr().out


def test_task_add_move_and_list(math_store, capsys):
    assert run(math_store, "tasks", "add", "Limits", "--subject", "Math", "--due", "2025-01-10") == 0
    task_id = capsys.readouterr().out.strip()
    assert task_id == "id-1"

    assert run(math_store, "tasks", "move", task_id, "revision") == 0
    assert capsys.readouterr().out.strip() == "Moved to revision"
    assert math_store.find_task(task_id).status is TaskStatus.REVISION

    assert run(math_store, "tasks", "move", task_id, "revision") == 0
    assert capsys.readouterr().out.strip() == "Nothing to move"

    assert run(math_store, "tasks", "list") == 0
    out = capsys.readouterr().out
    assert "== For Revision (1)" in out
    assert "id-1  Limits [Math] due 2025-01-10" in out


def test_task_add_for_unknown_subject_reports_error(math_store, capsys):
    code = run(math_store, "tasks", "add", "Lab", "--subject", "Physics", "--due", "2025-01-10")
    assert code == 1
    assert "Unknown subject" in capsys.readouterr().err
    assert math_store.all_tasks() == []


def test_subtask_commands(math_store, capsys):
    run(math_store, "tasks", "add", "Limits", "--subject", "Math", "--due", "2025-01-10")
    task_id = capsys.readouterr().out.strip()
    run(math_store, "tasks", "subtask", task_id, "Read chapter")
    subtask_id = capsys.readouterr().out.strip()
    assert run(math_store, "tasks", "toggle", task_id, subtask_id) == 0
    assert capsys.readouterr().out.strip() == "done"
    assert run(math_store, "tasks", "toggle", task_id, "missing") == 1


def test_resource_add_defaults_title(math_store, capsys):
    code = run(
        math_store,
        "resources", "add", "https://www.khanacademy.org/limits",
        "--subject", "Math", "--tag", "video", "--tag", "video",
    )
    assert code == 0
    resource_id = capsys.readouterr().out.strip()
    resource = math_store.find_resource(resource_id)
    assert resource.title == "Resource from khanacademy.org"
    assert resource.tags == ["video"]

    run(math_store, "resources", "list", "--query", "VIDEO")
    assert "Resource from khanacademy.org" in capsys.readouterr().out
    run(math_store, "resources", "delete", resource_id)
    assert capsys.readouterr().out.strip() == "Deleted"


def test_stats(math_store, capsys):
    run(math_store, "tasks", "add", "Limits", "--subject", "Math", "--due", "2025-01-10", "--status", "completed")
    capsys.readouterr()
    assert run(math_store, "stats") == 0
    out = capsys.readouterr().out
    assert "Tasks: 1 (1 completed, 100%)" in out
    assert "Math: 1/1" in out
