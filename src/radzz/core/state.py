# src/radzz/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..connectors.console_connector import ConsolePresenter
    from ..storage.preferences import Preferences
    from ..sync.google_tasks import TaskSync
    from ..tasks.task_store import TaskStore
    from ..timer.study_timer import StudyTimer
    from .ports import PreferencesRepo


@dataclass
class AppState:
    """
    Per-process wiring, built once by cli.bootstrap and passed to every
    command handler. There are no module-level singletons besides settings.
    """

    settings: Any
    store: TaskStore
    presenter: ConsolePresenter
    timer: StudyTimer
    preferences_repo: PreferencesRepo
    preferences: Preferences

    # None when Google Tasks is not configured.
    sync: TaskSync | None = None

    # Serializes console commands with background timer notifications.
    lock: threading.RLock = field(default_factory=threading.RLock)
