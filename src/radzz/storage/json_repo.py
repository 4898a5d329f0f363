# src/radzz/storage/json_repo.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..core.errors import PersistenceError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class JsonTaskRepo:
    """
    Whole-collection JSON file store.

    File layout: {"version": 1, "tasks": [{...}, ...]}.
    A bare JSON list (old local-storage dumps) is accepted on read.
    Writes go to a .tmp sibling first and are moved into place with os.replace,
    so a crash mid-write never leaves a half-written collection behind.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_all(self) -> list[Task]:
        if not self._path.exists():
            return []

        try:
            raw = self._path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {self._path}: {e}") from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt task file {self._path}: {e}") from e

        items: Any = data.get("tasks", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise PersistenceError(f"Corrupt task file {self._path}: 'tasks' is not a list")

        tasks: list[Task] = []
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise PersistenceError(f"Corrupt task file {self._path}: entry {i} is not an object")
            try:
                tasks.append(Task.from_dict(item))
            except ValueError as e:
                raise PersistenceError(f"Corrupt task file {self._path}: entry {i}: {e}") from e

        logger.debug("Read %d tasks from %s", len(tasks), self._path)
        return tasks

    def save_all(self, tasks: Sequence[Task]) -> None:
        payload = {"version": FORMAT_VERSION, "tasks": [t.to_dict() for t in tasks]}
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceError(f"Cannot write {self._path}: {e}") from e

        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)
        logger.debug("Wrote %d tasks to %s", len(tasks), self._path)
