# src/radzz/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import TextIO

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import NotifyLevel, Task, ViewName

logger = logging.getLogger(__name__)

LEVEL_TAGS: dict[NotifyLevel, str] = {
    NotifyLevel.SUCCESS: "OK",
    NotifyLevel.WARNING: "WARN",
    NotifyLevel.ERROR: "ERROR",
    NotifyLevel.INFO: "INFO",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_task(task: Task, *, today: date | None = None) -> list[str]:
    """One task as console lines: checkbox, id, title, meta, then notes indented."""
    box = "[x]" if task.is_completed else "[ ]"
    meta: list[str] = []
    if task.due is not None:
        due = f"due {task.due.isoformat()}"
        if task.is_overdue(today):
            due += " (Overdue)"
        meta.append(due)
    meta.append(f"{task.priority.value} priority")
    if task.is_completed:
        meta.append("completed")

    lines = [f"{box} {task.id}  {task.title}  - {', '.join(meta)}"]
    if task.notes:
        lines.append(f"      {task.notes}")
    return lines


@dataclass(frozen=True, slots=True)
class RenderedView:
    tasks: tuple[Task, ...]
    empty_message: str

    def format(self, *, today: date | None = None) -> str:
        if not self.tasks:
            return f"  ({self.empty_message})"
        lines: list[str] = []
        for t in self.tasks:
            lines.extend("  " + line for line in format_task(t, today=today))
        return "\n".join(lines)


class ConsolePresenter:
    """
    Presenter for the console REPL.

    Views are kept (not printed) on every render; commands print the one the
    user asked for. Notifications print immediately with a timestamp, also
    from the timer thread.
    """

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out
        self._views: dict[ViewName, RenderedView] = {}
        self._lock = threading.Lock()

    def render_view(self, view: ViewName, tasks: Sequence[Task], empty_message: str) -> None:
        with self._lock:
            self._views[ViewName(view)] = RenderedView(tasks=tuple(tasks), empty_message=empty_message)

    def notify(self, message: str, level: NotifyLevel) -> None:
        tag = LEVEL_TAGS.get(NotifyLevel(level), str(level).upper())
        with self._lock:
            print(f"[{_ts_local()}] [{tag}] {message}", file=self._out or sys.stdout, flush=True)

    def rendered(self, view: ViewName) -> RenderedView | None:
        with self._lock:
            return self._views.get(view)

    def format_view(self, view: ViewName, *, today: date | None = None) -> str:
        rendered = self.rendered(view)
        if rendered is None:
            return "  (not loaded)"
        return rendered.format(today=today)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    print(f"[{_ts_local()}] [CONSOLE] Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            with state.lock:
                reply = command_registry.handle(state, user_input, emit=print)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            print("Commands start with '/'. Use /help to list available commands.")
            continue

        if reply:
            print(reply)

    logger.info("Console connector finished.")
