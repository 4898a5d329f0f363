# tests/conftest.py

from __future__ import annotations

import io
from pathlib import Path
from types import SimpleNamespace

import pytest

from radzz.connectors.console_connector import ConsolePresenter
from radzz.core.state import AppState
from radzz.storage.json_repo import JsonTaskRepo
from radzz.storage.preferences import JsonPreferencesRepo
from radzz.tasks.task_store import TaskStore
from radzz.timer.study_timer import StudyTimer

from .fakes import FakeClock, FakePresenter, InMemoryTaskRepo, sequential_ids


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="radzz-test",
        log_level="DEBUG",
        storage_backend="json",
        data_dir=tmp_path,
        tasks_json_path=tmp_path / "tasks.json",
        tasks_db_path=tmp_path / "tasks.sqlite3",
        preferences_path=tmp_path / "preferences.json",
        priority_view_limit=5,
        timer_tick_seconds=0.01,
        timer_enabled=False,
        google_access_token=None,
        google_tasklist_id="@default",
        google_base_url="https://tasks.test/tasks/v1",
        google_timeout_seconds=1.0,
        sync_map_path=tmp_path / "google_sync.json",
        sync_enabled=False,
    )


@pytest.fixture()
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture()
def repo() -> InMemoryTaskRepo:
    return InMemoryTaskRepo()


@pytest.fixture()
def store(repo: InMemoryTaskRepo, presenter: FakePresenter) -> TaskStore:
    s = TaskStore(repo, presenter, id_factory=sequential_ids())
    s.load()
    return s


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState wired the way bootstrap does it, with a console presenter
    writing into a buffer and a hand-driven timer clock.

    NOTE: the JSON repo is real here because command tests go end to end.
    """
    console = ConsolePresenter(out=io.StringIO())
    prefs_repo = JsonPreferencesRepo(settings.preferences_path)
    prefs = prefs_repo.load()
    task_store = TaskStore(
        JsonTaskRepo(settings.tasks_json_path),
        console,
        id_factory=sequential_ids(),
    )
    task_store.load()
    return AppState(
        settings=settings,
        store=task_store,
        presenter=console,
        timer=StudyTimer(prefs, clock=clock),
        preferences_repo=prefs_repo,
        preferences=prefs,
    )
