# src/radzz/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """Completion status (names follow the Google Tasks API)."""

    NEEDS_ACTION = "needsAction"
    COMPLETED = "completed"

    @classmethod
    def coerce(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.NEEDS_ACTION
        try:
            return cls(str(raw))
        except ValueError:
            return cls.NEEDS_ACTION

    def flipped(self) -> TaskStatus:
        return TaskStatus.NEEDS_ACTION if self is TaskStatus.COMPLETED else TaskStatus.COMPLETED


class TaskPriority(StrEnum):
    """
    Task priority.

    Absent and unrecognized values both become MEDIUM, so the creation path
    and the priority sort can never disagree about a task's weight.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self]

    @classmethod
    def coerce(cls, raw: Any) -> TaskPriority:
        if not raw:
            return DEFAULT_PRIORITY
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return DEFAULT_PRIORITY


DEFAULT_PRIORITY = TaskPriority.MEDIUM

PRIORITY_WEIGHTS: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


class TaskFilter(StrEnum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    HIGH = "high"


class ViewName(StrEnum):
    PRIMARY_LIST = "primary-list"
    PRIORITY_LIST = "priority-list"
    SELECTOR = "selector"


class NotifyLevel(StrEnum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


def parse_due(raw: Any) -> date | None:
    """
    Accept a date, an ISO date string, or an RFC 3339 timestamp
    ("2026-10-19T00:00:00.000Z"; only the date part is kept).
    Empty values mean "no due date".
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    return date.fromisoformat(text[:10])


def new_task_id() -> str:
    return uuid.uuid4().hex[:8]


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    notes: str = ""
    due: date | None = None
    priority: TaskPriority = DEFAULT_PRIORITY
    status: TaskStatus = TaskStatus.NEEDS_ACTION

    @property
    def is_completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    def is_overdue(self, today: date | None = None) -> bool:
        if self.due is None or self.is_completed:
            return False
        return self.due < (today or date.today())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "notes": self.notes,
            "due": self.due.isoformat() if self.due else None,
            "priority": self.priority.value,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        """Build a Task from stored data. Raises ValueError on missing id/title or a bad due date."""
        task_id = str(raw.get("id") or "").strip()
        title = str(raw.get("title") or "").strip()
        if not task_id:
            raise ValueError("stored task has no id")
        if not title:
            raise ValueError(f"stored task {task_id} has no title")
        return cls(
            id=task_id,
            title=title,
            notes=str(raw.get("notes") or ""),
            due=parse_due(raw.get("due")),
            priority=TaskPriority.coerce(raw.get("priority")),
            status=TaskStatus.coerce(raw.get("status")),
        )


@dataclass(frozen=True, slots=True)
class EditSession:
    """editing_task_id is set if and only if is_editing is True."""

    is_editing: bool = False
    editing_task_id: str | None = None

    @classmethod
    def editing(cls, task_id: str) -> EditSession:
        return cls(is_editing=True, editing_task_id=task_id)


NOT_EDITING = EditSession()
