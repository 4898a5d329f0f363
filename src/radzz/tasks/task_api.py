# src/radzz/tasks/task_api.py

from __future__ import annotations

import logging

from ..core.errors import PersistenceError, SyncError, ValidationError
from ..core.state import AppState
from ..storage.preferences import Preferences
from ..sync.google_tasks import SyncReport, TaskSync
from .task_models import NotifyLevel, Task

logger = logging.getLogger(__name__)


def set_focus_task(state: AppState, task_id: str | None) -> Task | None:
    """
    Point the study timer at a task.
    An empty id is a no-op; an unknown id is reported, not raised.
    """
    if not task_id:
        return None

    task = state.store.lookup(task_id)
    if task is None:
        state.presenter.notify("Task not found", NotifyLevel.WARNING)
        return None

    state.timer.set_focus_task(task)
    state.presenter.notify(f"Focusing on: {task.title}", NotifyLevel.SUCCESS)
    logger.debug("Focus task set id=%s", task.id)
    return task


def save_preferences(
    state: AppState,
    *,
    study_duration: int | None = None,
    break_duration: int | None = None,
) -> Preferences:
    current = state.preferences
    prefs = Preferences(
        study_duration=current.study_duration if study_duration is None else study_duration,
        break_duration=current.break_duration if break_duration is None else break_duration,
    )
    try:
        state.preferences_repo.save(prefs)
    except ValidationError as exc:
        state.presenter.notify(str(exc), NotifyLevel.WARNING)
        raise
    except PersistenceError:
        state.presenter.notify("Failed to save preferences", NotifyLevel.ERROR)
        raise

    state.preferences = prefs
    state.timer.set_preferences(prefs)
    state.presenter.notify("Preferences saved!", NotifyLevel.SUCCESS)
    return prefs


def _require_sync(state: AppState) -> TaskSync:
    if state.sync is None:
        exc = SyncError("Google Tasks is not connected. Set RADZZ_GOOGLE_ACCESS_TOKEN to enable sync.")
        state.presenter.notify(str(exc), NotifyLevel.WARNING)
        raise exc
    return state.sync


def sync_push(state: AppState) -> SyncReport:
    sync = _require_sync(state)
    try:
        report = sync.push(state.store.tasks)
    except SyncError as exc:
        logger.warning("Sync push failed: %s", exc)
        state.presenter.notify("Failed to sync with Google Tasks", NotifyLevel.ERROR)
        raise
    state.presenter.notify(report.summary(), NotifyLevel.SUCCESS)
    return report


def sync_pull(state: AppState) -> SyncReport:
    sync = _require_sync(state)
    try:
        report = sync.pull(state.store)
    except SyncError as exc:
        logger.warning("Sync pull failed: %s", exc)
        state.presenter.notify("Failed to sync with Google Tasks", NotifyLevel.ERROR)
        raise
    state.presenter.notify(report.summary(), NotifyLevel.SUCCESS)
    return report
