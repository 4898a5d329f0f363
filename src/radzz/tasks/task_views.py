# src/radzz/tasks/task_views.py

"""
Derived views over the task collection.

Pure functions: the store recomputes all three after every mutation,
load and filter change, then hands them to the presenter.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .task_models import Task, TaskFilter, TaskPriority, TaskStatus, ViewName

PRIORITY_VIEW_LIMIT = 5

EMPTY_MESSAGES: dict[ViewName, str] = {
    ViewName.PRIMARY_LIST: "No tasks match your filter",
    ViewName.PRIORITY_LIST: "No priority tasks",
    ViewName.SELECTOR: "No tasks yet",
}

_PREDICATES: dict[TaskFilter, Callable[[Task], bool]] = {
    TaskFilter.ALL: lambda t: True,
    TaskFilter.PENDING: lambda t: t.status is not TaskStatus.COMPLETED,
    TaskFilter.COMPLETED: lambda t: t.status is TaskStatus.COMPLETED,
    TaskFilter.HIGH: lambda t: t.priority is TaskPriority.HIGH,
}


@dataclass(frozen=True, slots=True)
class TaskViews:
    filtered: tuple[Task, ...] = ()
    priority: tuple[Task, ...] = ()
    selector: tuple[Task, ...] = ()

    def by_name(self) -> dict[ViewName, tuple[Task, ...]]:
        return {
            ViewName.PRIMARY_LIST: self.filtered,
            ViewName.PRIORITY_LIST: self.priority,
            ViewName.SELECTOR: self.selector,
        }


def filter_tasks(tasks: Sequence[Task], active: TaskFilter) -> tuple[Task, ...]:
    pred = _PREDICATES[active]
    return tuple(t for t in tasks if pred(t))


def priority_tasks(tasks: Sequence[Task], limit: int = PRIORITY_VIEW_LIMIT) -> tuple[Task, ...]:
    """
    Top incomplete tasks by descending priority weight.

    sorted() is stable, so equal-priority tasks keep their collection order.
    """
    open_tasks = [t for t in tasks if t.status is not TaskStatus.COMPLETED]
    ranked = sorted(open_tasks, key=lambda t: t.priority.weight, reverse=True)
    return tuple(ranked[: max(0, int(limit))])


def compute_views(
    tasks: Sequence[Task],
    active: TaskFilter,
    *,
    priority_limit: int = PRIORITY_VIEW_LIMIT,
) -> TaskViews:
    return TaskViews(
        filtered=filter_tasks(tasks, active),
        priority=priority_tasks(tasks, priority_limit),
        selector=tuple(tasks),
    )
