# src/radzz/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task repo, presenter, timer, preferences and optional
  Google Tasks sync into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import ConsolePresenter
from ..core.ports import TaskRepo
from ..core.state import AppState
from ..storage.json_repo import JsonTaskRepo
from ..storage.preferences import JsonPreferencesRepo
from ..storage.sqlite_repo import SqliteTaskRepo
from ..sync.google_tasks import GoogleTasksClient, TaskSync
from ..tasks.task_store import TaskStore
from ..timer.study_timer import StudyTimer

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_json_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)


def build_task_repo(settings) -> TaskRepo:
    if settings.storage_backend == "sqlite":
        return SqliteTaskRepo(settings.tasks_db_path)
    return JsonTaskRepo(settings.tasks_json_path)


def build_sync(settings) -> TaskSync | None:
    if not settings.sync_enabled:
        logger.info("Google Tasks sync disabled (no access token).")
        return None
    client = GoogleTasksClient(
        settings.google_access_token,
        base_url=settings.google_base_url,
        timeout_seconds=settings.google_timeout_seconds,
    )
    return TaskSync(client, settings.sync_map_path, tasklist=settings.google_tasklist_id)


def create_initial_state(*, settings=None, presenter: ConsolePresenter | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). Tasks are not loaded here.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    presenter = presenter or ConsolePresenter()
    store = TaskStore(
        build_task_repo(settings),
        presenter,
        priority_limit=settings.priority_view_limit,
    )

    prefs_repo = JsonPreferencesRepo(settings.preferences_path)
    prefs = prefs_repo.load()

    return AppState(
        settings=settings,
        store=store,
        presenter=presenter,
        timer=StudyTimer(prefs),
        preferences_repo=prefs_repo,
        preferences=prefs,
        sync=build_sync(settings),
    )
