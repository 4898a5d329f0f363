# src/radzz/storage/sqlite_repo.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Sequence
from pathlib import Path

from ..core.errors import PersistenceError
from ..tasks.task_models import Task, TaskPriority, TaskStatus, parse_due

logger = logging.getLogger(__name__)


class SqliteTaskRepo:
    """
    SQLite task store with whole-collection semantics.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    save_all() replaces every row inside one transaction, so readers see
    either the previous collection or the new one. Collection order lives
    in the position column.

    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Cannot open task database {self._db_path}: {e}") from e
        logger.info("SqliteTaskRepo ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    title TEXT NOT NULL,
                    notes TEXT NOT NULL DEFAULT '',
                    due TEXT,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    status TEXT NOT NULL DEFAULT 'needsAction'
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskRepo migration: added column %s", name)

            add_col("position", "INTEGER NOT NULL DEFAULT 0")
            add_col("notes", "TEXT NOT NULL DEFAULT ''")
            add_col("due", "TEXT")
            add_col("priority", "TEXT NOT NULL DEFAULT 'medium'")
            add_col("status", "TEXT NOT NULL DEFAULT 'needsAction'")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_position ON tasks(position)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        title = str(row["title"] or "").strip()
        if not title:
            raise ValueError(f"stored task {row['id']} has no title")
        return Task(
            id=str(row["id"]),
            title=title,
            notes=str(row["notes"] or ""),
            due=parse_due(row["due"]),
            priority=TaskPriority.coerce(row["priority"]),
            status=TaskStatus.coerce(row["status"]),
        )

    # ---- TaskRepo ----

    def load_all(self) -> list[Task]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT * FROM tasks ORDER BY position ASC, rowid ASC").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot read tasks from {self._db_path}: {e}") from e

        try:
            return [self._row_to_task(r) for r in rows]
        except ValueError as e:
            raise PersistenceError(f"Corrupt task row in {self._db_path}: {e}") from e

    def save_all(self, tasks: Sequence[Task]) -> None:
        rows = [
            (
                t.id,
                pos,
                t.title,
                t.notes,
                t.due.isoformat() if t.due else None,
                t.priority.value,
                t.status.value,
            )
            for pos, t in enumerate(tasks)
        ]
        try:
            conn = self._get_conn()
            try:
                # "with conn" commits on success and rolls back on any error.
                with conn:
                    conn.execute("DELETE FROM tasks")
                    conn.executemany(
                        """
                        INSERT INTO tasks(id, position, title, notes, due, priority, status)
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        rows,
                    )
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot write tasks to {self._db_path}: {e}") from e
        logger.debug("Wrote %d tasks to %s", len(rows), self._db_path)
