# tests/fakes.py

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field

from radzz.core.errors import PersistenceError
from radzz.tasks.task_models import NotifyLevel, Task, ViewName


@dataclass
class FakePresenter:
    """
    Presenter that records everything for assertions.
    """

    views: dict[ViewName, tuple[Task, ...]] = field(default_factory=dict)
    empty_messages: dict[ViewName, str] = field(default_factory=dict)
    render_calls: int = 0
    notifications: list[tuple[str, NotifyLevel]] = field(default_factory=list)

    def render_view(self, view: ViewName, tasks: Sequence[Task], empty_message: str) -> None:
        self.views[view] = tuple(tasks)
        self.empty_messages[view] = empty_message
        self.render_calls += 1

    def notify(self, message: str, level: NotifyLevel) -> None:
        self.notifications.append((message, level))

    @property
    def messages(self) -> list[str]:
        return [m for m, _ in self.notifications]

    def ids(self, view: ViewName) -> list[str]:
        return [t.id for t in self.views.get(view, ())]


class InMemoryTaskRepo:
    """
    TaskRepo kept in a list, with switches to simulate storage failures.
    """

    def __init__(self, tasks: Sequence[Task] = ()) -> None:
        self.stored: list[Task] = list(tasks)
        self.save_calls = 0
        self.load_calls = 0
        self.fail_load = False
        self.fail_save = False

    def load_all(self) -> list[Task]:
        self.load_calls += 1
        if self.fail_load:
            raise PersistenceError("storage unreadable")
        return list(self.stored)

    def save_all(self, tasks: Sequence[Task]) -> None:
        if self.fail_save:
            raise PersistenceError("disk full")
        self.save_calls += 1
        self.stored = list(tasks)


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def sequential_ids(prefix: str = "t"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"
