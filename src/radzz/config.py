# src/radzz/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (Google sync stays off without a token).
- Every path defaults under a gitignored local data dir.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "RADZZ"

STORAGE_BACKENDS = ("json", "sqlite")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage_backend: str
    data_dir: Path
    tasks_json_path: Path
    tasks_db_path: Path
    preferences_path: Path

    # ---- Dashboard ----
    priority_view_limit: int
    timer_tick_seconds: float
    timer_enabled: bool

    # ---- Google Tasks sync ----
    google_access_token: str | None
    google_tasklist_id: str
    google_base_url: str
    google_timeout_seconds: float
    sync_map_path: Path

    @property
    def sync_enabled(self) -> bool:
        return bool(self.google_access_token and self.google_access_token.strip())

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="radzz") or "radzz"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        storage_backend = _env(_k("STORAGE"), "json").strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            storage_backend = "json"

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/radzz"))
        tasks_json_path = _env_path(_k("TASKS_JSON_PATH"), data_dir / "tasks.json")
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        preferences_path = _env_path(_k("PREFERENCES_PATH"), data_dir / "preferences.json")

        priority_view_limit = max(1, _env_int(_k("PRIORITY_VIEW_LIMIT"), 5))
        timer_tick_seconds = max(0.1, _env_float(_k("TIMER_TICK_SECONDS"), 1.0))
        timer_enabled = _env_bool(_k("TIMER_ENABLED"), True)

        google_access_token = _first_env(
            _k("GOOGLE_ACCESS_TOKEN"), "GOOGLE_TASKS_ACCESS_TOKEN", default=None
        )
        google_tasklist_id = _env(_k("GOOGLE_TASKLIST_ID"), "@default").strip() or "@default"
        google_base_url = _env(_k("GOOGLE_BASE_URL"), "https://tasks.googleapis.com/tasks/v1")
        google_timeout_seconds = _env_float(_k("GOOGLE_TIMEOUT_SECONDS"), 15.0)
        sync_map_path = _env_path(_k("SYNC_MAP_PATH"), data_dir / "google_sync.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage_backend=storage_backend,
            data_dir=data_dir,
            tasks_json_path=tasks_json_path,
            tasks_db_path=tasks_db_path,
            preferences_path=preferences_path,
            priority_view_limit=priority_view_limit,
            timer_tick_seconds=timer_tick_seconds,
            timer_enabled=timer_enabled,
            google_access_token=google_access_token,
            google_tasklist_id=google_tasklist_id,
            google_base_url=google_base_url,
            google_timeout_seconds=google_timeout_seconds,
            sync_map_path=sync_map_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
