# src/radzz/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends and presenters swappable and makes testing easier.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..storage.preferences import Preferences
    from ..tasks.task_models import NotifyLevel, Task, ViewName


class TaskRepo(Protocol):
    """
    Persistence provider: whole-collection load and overwrite.

    - load_all on an empty/absent store returns [] (not an error)
    - corrupt or unreadable storage raises PersistenceError
    - save_all replaces everything; no partial/merge semantics
    """

    def load_all(self) -> list[Task]: ...
    def save_all(self, tasks: Sequence[Task]) -> None: ...


class Presenter(Protocol):
    """UI-side port: draws a view and shows transient notifications."""

    def render_view(self, view: ViewName, tasks: Sequence[Task], empty_message: str) -> None: ...
    def notify(self, message: str, level: NotifyLevel) -> None: ...


class PreferencesRepo(Protocol):
    def load(self) -> Preferences: ...
    def save(self, prefs: Preferences) -> None: ...
