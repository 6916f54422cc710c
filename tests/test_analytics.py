from datetime import date

import pytest

from study_planner.domain import Priority, StudyData, TaskStatus
from study_planner.services import summarize

from conftest import make_task


def test_summary_of_empty_data():
    summary = summarize(StudyData(), today=date(2025, 1, 6))
    assert summary.total_tasks == 0
    assert summary.completion_rate == 0.0
    assert summary.average_session_time == 0.0
    assert summary.current_streak == 0
    assert [day.day for day in summary.last_seven_days][-1] == date(2025, 1, 6)
    assert len(summary.last_seven_days) == 7


def test_summary_counts_and_times(math_store, clock):
    math_store.add_subject("Physics")
    make_task(math_store, title="Yesterday", status="completed", timeSpent=1800, priority="high")
    clock.advance(days=1)
    make_task(math_store, title="Today", status="completed", timeSpent=3600)
    make_task(math_store, title="Lab", subject="Physics", status="inProgress", timeSpent=600)
    make_task(math_store, title="Later", subject="Physics")

    summary = summarize(math_store.data, today=clock.now.date())

    assert summary.total_tasks == 4
    assert summary.completed_tasks == 2
    assert summary.in_progress == 1
    assert summary.completion_rate == pytest.approx(50.0)
    assert summary.total_study_time == 6000
    assert summary.average_session_time == pytest.approx(3000.0)
    assert summary.today_study_time == 4200
    assert summary.current_streak == 2

    math_stats, physics_stats = summary.subjects
    assert (math_stats.subject, math_stats.total, math_stats.completed) == ("Math", 2, 2)
    assert math_stats.completion_rate == pytest.approx(100.0)
    assert physics_stats.time_spent == 600

    high = next(item for item in summary.priorities if item.priority is Priority.HIGH)
    assert (high.count, high.completed) == (1, 1)

    assert summary.last_seven_days[-1].completed == 1
    assert summary.last_seven_days[-1].hours == pytest.approx(1.0)
    assert summary.last_seven_days[-2].completed == 1


def test_streak_allows_empty_today(math_store, clock):
    task = make_task(math_store, status="completed")
    clock.advance(days=1)
    summary = summarize(math_store.data, today=clock.now.date())
    assert summary.current_streak == 1
    clock.advance(days=1)
    assert summarize(math_store.data, today=clock.now.date()).current_streak == 0
    assert math_store.find_task(task.id).status is TaskStatus.COMPLETED
