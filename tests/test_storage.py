# tests/test_storage.py

from __future__ import annotations

import json
import sqlite3
from datetime import date
from pathlib import Path

import pytest

from radzz.core.errors import PersistenceError, ValidationError
from radzz.storage.json_repo import JsonTaskRepo
from radzz.storage.preferences import JsonPreferencesRepo, Preferences
from radzz.storage.sqlite_repo import SqliteTaskRepo
from radzz.tasks.task_models import NotifyLevel, Task, TaskPriority, TaskStatus
from radzz.tasks.task_store import TaskStore

from .fakes import FakePresenter

TASKS = [
    Task(id="b2", title="Biology notes", notes="ch 4", due=date(2026, 10, 30), priority=TaskPriority.HIGH),
    Task(id="a1", title="Math set", status=TaskStatus.COMPLETED, priority=TaskPriority.LOW),
]


def test_json_missing_file_is_empty(tmp_path: Path) -> None:
    assert JsonTaskRepo(tmp_path / "nope.json").load_all() == []


def test_json_save_then_load_keeps_order_and_fields(tmp_path: Path) -> None:
    repo = JsonTaskRepo(tmp_path / "data" / "tasks.json")
    repo.save_all(TASKS)

    assert repo.load_all() == TASKS
    data = json.loads(repo.path.read_text("utf-8"))
    assert data["version"] == 1
    assert data["tasks"][0]["due"] == "2026-10-30"
    assert not repo.path.with_suffix(".json.tmp").exists()


def test_json_reads_bare_list(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "1", "title": "Old", "priority": ""}]), "utf-8")

    (task,) = JsonTaskRepo(path).load_all()
    assert task.priority is TaskPriority.MEDIUM


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"tasks": {"id": "1"}}),
        json.dumps({"tasks": ["just a string"]}),
        json.dumps({"tasks": [{"id": "1", "title": ""}]}),
        json.dumps({"tasks": [{"id": "1", "title": "x", "due": "soon"}]}),
    ],
)
def test_json_corrupt_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(content, "utf-8")
    with pytest.raises(PersistenceError):
        JsonTaskRepo(path).load_all()


def test_json_non_utf8_file_is_reported_by_store(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_bytes(b'{"tasks": [{"id": "1", "title": "\xff\xfe"}]}')
    presenter = FakePresenter()

    with pytest.raises(PersistenceError):
        TaskStore(JsonTaskRepo(path), presenter).load()
    assert presenter.notifications == [("Failed to load tasks", NotifyLevel.ERROR)]


def test_json_unwritable_location_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", "utf-8")
    with pytest.raises(PersistenceError):
        JsonTaskRepo(blocker / "tasks.json").save_all(TASKS)


def test_sqlite_save_replaces_whole_collection(tmp_path: Path) -> None:
    repo = SqliteTaskRepo(tmp_path / "tasks.sqlite3")
    assert repo.load_all() == []

    repo.save_all(TASKS)
    assert repo.load_all() == TASKS

    repo.save_all(TASKS[1:])
    assert repo.load_all() == TASKS[1:]


def test_sqlite_duplicate_ids_roll_back(tmp_path: Path) -> None:
    repo = SqliteTaskRepo(tmp_path / "tasks.sqlite3")
    repo.save_all(TASKS)

    with pytest.raises(PersistenceError):
        repo.save_all([TASKS[0], TASKS[0]])

    assert repo.load_all() == TASKS


def test_sqlite_migrates_old_schema(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(str(db))
    conn.execute("CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT NOT NULL)")
    conn.execute("INSERT INTO tasks(id, title) VALUES ('x1', 'Legacy')")
    conn.commit()
    conn.close()

    (task,) = SqliteTaskRepo(db).load_all()
    assert task == Task(id="x1", title="Legacy")


def test_preferences_defaults_and_fallbacks(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    repo = JsonPreferencesRepo(path)
    assert repo.load() == Preferences(study_duration=25, break_duration=5)

    path.write_text(json.dumps({"studyDuration": "50", "breakDuration": -3}), "utf-8")
    assert repo.load() == Preferences(study_duration=50, break_duration=5)

    path.write_text("garbage", "utf-8")
    assert repo.load() == Preferences()

    path.write_bytes(b"\xff\xfe\x00garbage")
    assert repo.load() == Preferences()


def test_preferences_save_validates(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    repo = JsonPreferencesRepo(path)

    with pytest.raises(ValidationError):
        repo.save(Preferences(study_duration=0, break_duration=5))
    assert not path.exists()

    repo.save(Preferences(study_duration=40, break_duration=10))
    assert json.loads(path.read_text("utf-8")) == {"studyDuration": 40, "breakDuration": 10}
    assert repo.load() == Preferences(study_duration=40, break_duration=10)
