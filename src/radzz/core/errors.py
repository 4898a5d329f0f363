# src/radzz/core/errors.py

"""
Error kinds raised by the dashboard core.

All of them are recoverable at the call boundary: the store notifies the
presenter first, then raises, and the UI layer turns them into a reply.
"""

from __future__ import annotations


class TaskError(Exception):
    """Base error for task operations."""


class ValidationError(TaskError):
    """Bad input (empty title, unknown filter, bad preference value)."""


class NotFoundError(TaskError):
    """Referenced task id is not in the collection."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class PersistenceError(TaskError):
    """Storage could not be read or written."""


class SyncError(TaskError):
    """Remote task service request failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
