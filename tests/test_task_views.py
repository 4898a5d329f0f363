# tests/test_task_views.py

from __future__ import annotations

from datetime import date

from radzz.tasks.task_models import Task, TaskFilter, TaskPriority, TaskStatus, parse_due
from radzz.tasks.task_views import compute_views, filter_tasks, priority_tasks


def _t(task_id: str, priority: str = "medium", status: str = "needsAction") -> Task:
    return Task.from_dict({"id": task_id, "title": task_id.upper(), "priority": priority, "status": status})


def test_filters_preserve_collection_order() -> None:
    tasks = [_t("a", "low"), _t("b", "high", "completed"), _t("c", "high"), _t("d")]

    assert [t.id for t in filter_tasks(tasks, TaskFilter.ALL)] == ["a", "b", "c", "d"]
    assert [t.id for t in filter_tasks(tasks, TaskFilter.PENDING)] == ["a", "c", "d"]
    assert [t.id for t in filter_tasks(tasks, TaskFilter.COMPLETED)] == ["b"]
    assert [t.id for t in filter_tasks(tasks, TaskFilter.HIGH)] == ["b", "c"]


def test_priority_tasks_respects_limit() -> None:
    tasks = [_t(f"t{i}", "low") for i in range(3)] + [_t("h", "high")]
    assert [t.id for t in priority_tasks(tasks, limit=2)] == ["h", "t0"]
    assert priority_tasks(tasks, limit=0) == ()


def test_compute_views_selector_is_unfiltered() -> None:
    tasks = [_t("a", status="completed"), _t("b")]
    views = compute_views(tasks, TaskFilter.PENDING)

    assert [t.id for t in views.filtered] == ["b"]
    assert [t.id for t in views.priority] == ["b"]
    assert [t.id for t in views.selector] == ["a", "b"]


def test_stored_defaults_are_explicit() -> None:
    task = Task.from_dict({"id": "x", "title": "Read", "priority": "whatever", "status": "bogus"})
    assert task.priority is TaskPriority.MEDIUM
    assert task.priority.weight == 2
    assert task.status is TaskStatus.NEEDS_ACTION


def test_parse_due_accepts_rfc3339_timestamps() -> None:
    assert parse_due("2026-10-19T00:00:00.000Z") == date(2026, 10, 19)
    assert parse_due("") is None
    assert parse_due(None) is None


def test_overdue_only_for_open_tasks() -> None:
    today = date(2026, 10, 19)
    late = Task(id="1", title="late", due=date(2026, 10, 1))
    done = Task(id="2", title="done", due=date(2026, 10, 1), status=TaskStatus.COMPLETED)
    assert late.is_overdue(today)
    assert not done.is_overdue(today)
