# src/radzz/storage/preferences.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from ..core.errors import PersistenceError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_STUDY_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5


@dataclass(frozen=True, slots=True)
class Preferences:
    """Study timer durations, in minutes."""

    study_duration: int = DEFAULT_STUDY_MINUTES
    break_duration: int = DEFAULT_BREAK_MINUTES

    def validated(self) -> Preferences:
        for name in ("study_duration", "break_duration"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValidationError(f"{name.replace('_', ' ')} must be a positive number of minutes")
        return self


def _minutes(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class JsonPreferencesRepo:
    """
    Preferences stored as a small JSON object.

    Reading is best-effort: a missing, unreadable or malformed file yields defaults.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> Preferences:
        if not self._path.exists():
            return Preferences()
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Unreadable preferences at %s; using defaults", self._path, exc_info=True)
            return Preferences()
        if not isinstance(data, dict):
            return Preferences()
        return Preferences(
            study_duration=_minutes(data.get("studyDuration"), DEFAULT_STUDY_MINUTES),
            break_duration=_minutes(data.get("breakDuration"), DEFAULT_BREAK_MINUTES),
        )

    def save(self, prefs: Preferences) -> None:
        prefs.validated()
        payload = asdict(prefs)
        data = {"studyDuration": payload["study_duration"], "breakDuration": payload["break_duration"]}
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceError(f"Cannot write preferences to {self._path}: {e}") from e
        logger.info("Saved preferences study=%s break=%s", prefs.study_duration, prefs.break_duration)
