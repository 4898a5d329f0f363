# src/radzz/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from ..core.errors import NotFoundError, PersistenceError, TaskError, ValidationError
from ..core.ports import Presenter, TaskRepo
from .task_models import (
    NOT_EDITING,
    EditSession,
    NotifyLevel,
    Task,
    TaskFilter,
    TaskPriority,
    TaskStatus,
    new_task_id,
    parse_due,
)
from .task_views import EMPTY_MESSAGES, PRIORITY_VIEW_LIMIT, TaskViews, compute_views

logger = logging.getLogger(__name__)

DRAFT_FIELDS = frozenset({"title", "notes", "due", "priority", "status"})

_MAX_ID_ATTEMPTS = 64


def _draft_fields(draft: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    """
    Normalize a create draft (partial=False) or an update patch (partial=True).

    "id" is immutable and silently dropped; other unknown keys are ignored.
    Missing fields fall back to the Task dataclass defaults on create.
    """
    unknown = set(draft) - DRAFT_FIELDS - {"id"}
    if unknown:
        logger.debug("Ignoring unknown task fields: %s", sorted(unknown))

    out: dict[str, Any] = {}

    if not partial or "title" in draft:
        title = str(draft.get("title") or "").strip()
        if not title:
            raise ValidationError("Please enter a task title")
        out["title"] = title

    if "notes" in draft:
        out["notes"] = str(draft["notes"] or "").strip()

    if "due" in draft:
        try:
            out["due"] = parse_due(draft["due"])
        except ValueError:
            raise ValidationError(f"Invalid due date: {draft['due']!r} (use YYYY-MM-DD)") from None

    if "priority" in draft:
        out["priority"] = TaskPriority.coerce(draft["priority"])

    if "status" in draft:
        out["status"] = TaskStatus.coerce(draft["status"])

    return out


def _check_unique_ids(tasks: Iterable[Task]) -> None:
    seen: set[str] = set()
    for t in tasks:
        if t.id in seen:
            raise PersistenceError(f"Duplicate task id in storage: {t.id}")
        seen.add(t.id)


class TaskStore:
    """
    Canonical in-memory task collection plus its view-state.

    After every mutating operation completes, persisted state and all three
    rendered views match the in-memory collection.

    Atomicity:
    - a mutation builds the new collection off to the side
    - only a successful repo.save_all() makes it the in-memory collection
    - a failed save leaves the previous collection authoritative

    Errors are reported to the presenter first, then raised to the caller.
    """

    def __init__(
        self,
        repo: TaskRepo,
        presenter: Presenter,
        *,
        id_factory: Callable[[], str] = new_task_id,
        priority_limit: int = PRIORITY_VIEW_LIMIT,
    ) -> None:
        self._repo = repo
        self._presenter = presenter
        self._id_factory = id_factory
        self._priority_limit = priority_limit

        self._tasks: list[Task] = []
        self._filter = TaskFilter.ALL
        self._edit: EditSession = NOT_EDITING
        self._views = TaskViews()

    # ---- read-only state ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def edit_session(self) -> EditSession:
        return self._edit

    @property
    def views(self) -> TaskViews:
        return self._views

    def lookup(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    # ---- loading ----

    def load(self) -> tuple[Task, ...]:
        """Replace the collection with the repo contents and re-render."""
        try:
            loaded = list(self._repo.load_all())
            _check_unique_ids(loaded)
        except PersistenceError as exc:
            logger.warning("Failed to load tasks: %s", exc)
            self._notify("Failed to load tasks", NotifyLevel.ERROR)
            raise

        self._tasks = loaded
        self._reconcile_edit_session()
        self._render()
        logger.debug("Loaded %d tasks", len(loaded))
        return self.tasks

    # ---- mutations ----

    def create(self, draft: Mapping[str, Any]) -> Task:
        try:
            fields = _draft_fields(draft, partial=False)
            task = Task(id=self._mint_id(), **fields)
            self._commit([*self._tasks, task])
        except TaskError as exc:
            self._report(exc, "Failed to save task")
            raise
        logger.info("Task created id=%s priority=%s", task.id, task.priority.value)
        return self.lookup(task.id) or task

    def update(self, task_id: str, patch: Mapping[str, Any]) -> Task:
        try:
            idx = self._require_index(task_id)
            fields = _draft_fields(patch, partial=True)
            current = self._tasks[idx]
            updated = Task(
                id=current.id,
                title=fields.get("title", current.title),
                notes=fields.get("notes", current.notes),
                due=fields.get("due", current.due),
                priority=fields.get("priority", current.priority),
                status=fields.get("status", current.status),
            )
            new_tasks = list(self._tasks)
            new_tasks[idx] = updated
            self._commit(new_tasks)
        except TaskError as exc:
            self._report(exc, "Failed to update task")
            raise
        logger.info("Task updated id=%s fields=%s", task_id, sorted(fields))
        return self.lookup(task_id) or updated

    def toggle(self, task_id: str) -> Task | None:
        """Flip completed/needsAction. An unknown id is reported, not raised."""
        task = self.lookup(task_id)
        if task is None:
            logger.info("Toggle ignored, task %s not found", task_id)
            self._notify("Task not found", NotifyLevel.WARNING)
            return None

        updated = self.update(task_id, {"status": task.status.flipped()})
        if updated.is_completed:
            self._notify("Task completed! 🎉", NotifyLevel.SUCCESS)
        else:
            self._notify("Task marked as pending", NotifyLevel.SUCCESS)
        return updated

    def delete(self, task_id: str) -> Task:
        """Remove a task. Confirmation is the caller's job."""
        try:
            idx = self._require_index(task_id)
            removed = self._tasks[idx]
            self._commit(self._tasks[:idx] + self._tasks[idx + 1 :])
        except TaskError as exc:
            self._report(exc, "Failed to delete task")
            raise
        logger.info("Task deleted id=%s", task_id)
        self._notify("Task deleted", NotifyLevel.SUCCESS)
        return removed

    # ---- view-state ----

    def set_filter(self, value: str | TaskFilter) -> TaskFilter:
        try:
            new_filter = TaskFilter(str(value).strip().lower())
        except ValueError:
            exc = ValidationError(
                f"Unknown filter: {value!r} (use one of: {', '.join(f.value for f in TaskFilter)})"
            )
            self._report(exc, "")
            raise exc from None

        self._filter = new_filter
        self._render()
        return new_filter

    def begin_edit(self, task_id: str) -> Task:
        task = self.lookup(task_id)
        if task is None:
            exc = NotFoundError(task_id)
            self._report(exc, "")
            raise exc
        self._edit = EditSession.editing(task.id)
        logger.debug("Edit session started id=%s", task.id)
        return task

    def cancel_edit(self) -> None:
        self._edit = NOT_EDITING

    def save(self, draft: Mapping[str, Any]) -> Task:
        """
        Single save action behind the task form:
        - edit session active -> update the edited task
        - otherwise           -> create a new task
        The edit session is reset only after success.
        """
        session = self._edit
        if session.is_editing and session.editing_task_id is not None:
            task = self.update(session.editing_task_id, draft)
            message = "Task updated!"
        else:
            task = self.create(draft)
            message = "Task created!"

        self._edit = NOT_EDITING
        self._notify(message, NotifyLevel.SUCCESS)
        return task

    # ---- internals ----

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _require_index(self, task_id: str) -> int:
        idx = self._index_of(task_id)
        if idx is None:
            raise NotFoundError(task_id)
        return idx

    def _mint_id(self) -> str:
        existing = {t.id for t in self._tasks}
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = str(self._id_factory())
            if candidate and candidate not in existing:
                return candidate
        raise RuntimeError("id_factory keeps returning ids already in use")

    def _commit(self, new_tasks: Sequence[Task]) -> None:
        """Persist the full collection, then reload and re-render."""
        self._repo.save_all(new_tasks)
        self._tasks = list(new_tasks)

        try:
            reloaded = list(self._repo.load_all())
            _check_unique_ids(reloaded)
        except PersistenceError:
            # Saved collection stays authoritative until the next good load.
            logger.warning("Reload after save failed; keeping in-memory tasks", exc_info=True)
        else:
            self._tasks = reloaded

        self._reconcile_edit_session()
        self._render()

    def _reconcile_edit_session(self) -> None:
        task_id = self._edit.editing_task_id
        if task_id is not None and self._index_of(task_id) is None:
            logger.debug("Edit session dropped, task %s is gone", task_id)
            self._edit = NOT_EDITING

    def _render(self) -> None:
        self._views = compute_views(self._tasks, self._filter, priority_limit=self._priority_limit)
        for view, tasks in self._views.by_name().items():
            try:
                self._presenter.render_view(view, tasks, EMPTY_MESSAGES[view])
            except Exception:
                logger.exception("Presenter failed to render view=%s", view.value)

    def _notify(self, message: str, level: NotifyLevel) -> None:
        try:
            self._presenter.notify(message, level)
        except Exception:
            logger.exception("Presenter failed to notify level=%s", level.value)

    def _report(self, exc: TaskError, failure_message: str) -> None:
        if isinstance(exc, PersistenceError):
            logger.warning("%s: %s", failure_message, exc)
            self._notify(failure_message, NotifyLevel.ERROR)
        elif isinstance(exc, NotFoundError):
            logger.info("Task not found id=%s", exc.task_id)
            self._notify("Task not found", NotifyLevel.WARNING)
        else:
            logger.info("Rejected input: %s", exc)
            self._notify(str(exc), NotifyLevel.WARNING)
