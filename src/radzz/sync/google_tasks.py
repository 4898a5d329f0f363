# src/radzz/sync/google_tasks.py

from __future__ import annotations

"""
Google Tasks synchronization.

GoogleTasksClient is a thin httpx wrapper over the Tasks REST API.
TaskSync mirrors the local collection to one remote task list and imports
remote tasks it has not seen yet. Local ids are never replaced by remote
ids: the local<->remote mapping lives in its own small JSON file.

Priority has no Google Tasks counterpart and stays local-only.
"""

import contextlib
import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from ..core.errors import SyncError, ValidationError
from ..tasks.task_models import Task

if TYPE_CHECKING:
    from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://tasks.googleapis.com/tasks/v1"
DEFAULT_TASKLIST = "@default"
PAGE_SIZE = 100


class GoogleTasksClient:
    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not access_token or not access_token.strip():
            raise SyncError("Google Tasks access token is not set. Set RADZZ_GOOGLE_ACCESS_TOKEN in your .env.")

        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            headers={"Authorization": f"Bearer {access_token.strip()}"},
            timeout=httpx.Timeout(timeout_seconds, connect=5.0),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self._client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            raise SyncError(f"Google Tasks {method} {url} failed: HTTP {code}", status_code=code) from e
        except httpx.HTTPError as e:
            raise SyncError(f"Google Tasks {method} {url} failed: {e}") from e

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as e:
            raise SyncError(f"Google Tasks {method} {url} returned invalid JSON") from e
        return data if isinstance(data, dict) else {}

    def list_tasks(self, tasklist: str = DEFAULT_TASKLIST) -> list[dict[str, Any]]:
        """All tasks of a list, following nextPageToken. Completed and hidden tasks included."""
        items: list[dict[str, Any]] = []
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {
                "showCompleted": "true",
                "showHidden": "true",
                "maxResults": PAGE_SIZE,
            }
            if page_token:
                params["pageToken"] = page_token
            data = self._request("GET", f"lists/{tasklist}/tasks", params=params)
            items.extend(i for i in (data.get("items") or []) if isinstance(i, dict))
            page_token = data.get("nextPageToken")
            if not page_token:
                return items

    def insert_task(self, tasklist: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"lists/{tasklist}/tasks", json=body)

    def patch_task(self, tasklist: str, remote_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return self._request("PATCH", f"lists/{tasklist}/tasks/{remote_id}", json=body)

    def delete_task(self, tasklist: str, remote_id: str) -> None:
        self._request("DELETE", f"lists/{tasklist}/tasks/{remote_id}")


def task_to_remote(task: Task) -> dict[str, Any]:
    return {
        "title": task.title,
        "notes": task.notes,
        "status": task.status.value,
        # The API stores dates only; the time part is ignored.
        "due": f"{task.due.isoformat()}T00:00:00.000Z" if task.due else None,
    }


def remote_to_draft(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "title": item.get("title") or "",
        "notes": item.get("notes") or "",
        "due": item.get("due"),
        "status": item.get("status"),
    }


@dataclass(slots=True)
class SyncReport:
    inserted: int = 0
    updated: int = 0
    deleted: int = 0
    pulled: int = 0

    def summary(self) -> str:
        return (
            f"Google Tasks sync: {self.inserted} inserted, {self.updated} updated, "
            f"{self.deleted} deleted, {self.pulled} imported"
        )


class TaskSync:
    def __init__(
        self,
        client: GoogleTasksClient,
        map_path: str | Path,
        *,
        tasklist: str = DEFAULT_TASKLIST,
    ) -> None:
        self._client = client
        self._map_path = Path(map_path)
        self._tasklist = tasklist
        self._ids: dict[str, str] = self._load_map()

    @property
    def id_map(self) -> dict[str, str]:
        """local id -> remote id (copy)."""
        return dict(self._ids)

    def close(self) -> None:
        self._client.close()

    # ---- mapping file ----

    def _load_map(self) -> dict[str, str]:
        if not self._map_path.exists():
            return {}
        try:
            data = json.loads(self._map_path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable sync map at %s; starting fresh", self._map_path, exc_info=True)
            return {}
        if not isinstance(data, dict) or data.get("tasklist", self._tasklist) != self._tasklist:
            return {}
        ids = data.get("ids")
        if not isinstance(ids, dict):
            return {}
        return {str(k): str(v) for k, v in ids.items() if k and v}

    def _save_map(self) -> None:
        payload = {"tasklist": self._tasklist, "ids": self._ids}
        tmp = self._map_path.with_suffix(self._map_path.suffix + ".tmp")
        try:
            self._map_path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, indent=2), "utf-8")
            os.replace(tmp, self._map_path)
        except OSError:
            logger.exception("Failed to save sync map to %s", self._map_path)
            with contextlib.suppress(OSError):
                tmp.unlink()

    # ---- operations ----

    def push(self, tasks: Sequence[Task]) -> SyncReport:
        """
        Mirror local tasks to the remote list:
        - unmapped local task -> insert
        - mapped local task   -> patch (re-insert if it vanished remotely)
        - mapped, but deleted locally -> delete remotely
        """
        report = SyncReport()
        local_ids = {t.id for t in tasks}
        try:
            for task in tasks:
                body = task_to_remote(task)
                remote_id = self._ids.get(task.id)
                if remote_id:
                    try:
                        self._client.patch_task(self._tasklist, remote_id, body)
                        report.updated += 1
                        continue
                    except SyncError as e:
                        if e.status_code != 404:
                            raise
                        logger.info("Remote task %s is gone; re-inserting local %s", remote_id, task.id)
                created = self._client.insert_task(self._tasklist, body)
                new_remote_id = str(created.get("id") or "")
                if not new_remote_id:
                    raise SyncError("Google Tasks insert returned no id")
                self._ids[task.id] = new_remote_id
                report.inserted += 1

            for local_id, remote_id in list(self._ids.items()):
                if local_id in local_ids:
                    continue
                try:
                    self._client.delete_task(self._tasklist, remote_id)
                except SyncError as e:
                    if e.status_code != 404:
                        raise
                del self._ids[local_id]
                report.deleted += 1
        finally:
            # Keep partial progress so a retry never inserts duplicates.
            self._save_map()

        logger.info(report.summary())
        return report

    def pull(self, store: TaskStore) -> SyncReport:
        """Create local tasks for remote tasks this mapping has never seen."""
        report = SyncReport()
        known = set(self._ids.values())
        try:
            for item in self._client.list_tasks(self._tasklist):
                remote_id = str(item.get("id") or "")
                if not remote_id or remote_id in known or item.get("deleted"):
                    continue
                try:
                    task = store.create(remote_to_draft(item))
                except ValidationError:
                    logger.info("Skipping remote task %s without a usable title/due", remote_id)
                    continue
                self._ids[task.id] = remote_id
                known.add(remote_id)
                report.pulled += 1
        finally:
            self._save_map()

        logger.info(report.summary())
        return report
