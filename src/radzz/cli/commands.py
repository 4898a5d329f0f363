# src/radzz/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, cast

from ..core.errors import TaskError
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import TaskFilter, ViewName

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

CLEAR_MARK = "-"
CONFIRM_WORDS = {"yes", "y", "--yes", "-y"}


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /save, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string, or None if the line is not a command.

        TaskError is already on screen (the store and task_api notify the
        presenter before raising), so it turns into an empty reply here.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskError as exc:
            logger.debug("/%s failed: %s", name, exc)
            return ""

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_draft(text: str) -> dict[str, Any]:
    """
    Parse "title | notes | due | priority" into a task draft.

    Empty parts are left out (so an edit keeps the current value);
    "-" clears notes or the due date.
    """
    keys = ("title", "notes", "due", "priority")
    draft: dict[str, Any] = {}
    for key, raw in zip(keys, text.split("|")):
        value = raw.strip()
        if not value:
            continue
        if value == CLEAR_MARK and key in ("notes", "due"):
            draft[key] = "" if key == "notes" else None
            continue
        draft[key] = value
    return draft


def _primary(state: AppState) -> str:
    return f"Tasks ({state.store.filter.value}):\n{state.presenter.format_view(ViewName.PRIMARY_LIST)}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    done = sum(1 for t in tasks if t.is_completed)
    session = state.store.edit_session
    editing = f"editing {session.editing_task_id}" if session.is_editing else "not editing"
    sync = "connected" if state.sync is not None else "off"
    backend = str(getattr(state.settings, "storage_backend", "json"))
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} completed, {len(tasks) - done} pending)\n"
        f"  Filter: {state.store.filter.value}\n"
        f"  Edit session: {editing}\n"
        f"  Storage: {backend}\n"
        f"  Google Tasks: {sync}\n"
        f"  Timer: {state.timer.status_line()}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return _primary(state)


def cmd_dash(state: AppState, args: list[str]) -> str:
    return (
        "Priority tasks:\n"
        f"{state.presenter.format_view(ViewName.PRIORITY_LIST)}\n"
        f"Timer: {state.timer.status_line()}"
    )


def cmd_save(state: AppState, args: list[str]) -> str:
    """
    /save title | notes | due | priority
    Creates a task, or updates the one opened with /edit.
    """
    state.store.save(parse_draft(" ".join(args)))
    return _primary(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /edit <id>"
    task = state.store.begin_edit(args[0])
    due = task.due.isoformat() if task.due else CLEAR_MARK
    return (
        f"Editing {task.id}: {task.title} | {task.notes or CLEAR_MARK} | {due} | {task.priority.value}\n"
        "Use /save title | notes | due | priority (empty parts keep current values), or /cancel."
    )


def cmd_cancel(state: AppState, args: list[str]) -> str:
    if not state.store.edit_session.is_editing:
        return "Nothing to cancel."
    state.store.cancel_edit()
    return "Edit cancelled."


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    if state.store.toggle(args[0]) is None:
        return ""
    return _primary(state)


def cmd_delete(state: AppState, args: list[str]) -> str:
    """/rm <id> yes -> the trailing word is the confirmation."""
    if not args:
        return "Usage: /rm <id> yes"
    task_id = args[0]
    if not any(a.lower() in CONFIRM_WORDS for a in args[1:]):
        task = state.store.lookup(task_id)
        title = f' "{task.title}"' if task else ""
        return f"Are you sure you want to delete this task{title}? Repeat with: /rm {task_id} yes"
    state.store.delete(task_id)
    return _primary(state)


def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        names = ", ".join(f.value for f in TaskFilter)
        return f"Current filter: {state.store.filter.value}. Use /filter <{names}>."
    state.store.set_filter(args[0])
    return _primary(state)


def cmd_focus(state: AppState, args: list[str]) -> str:
    if not args:
        return (
            "Pick a task to focus on with /focus <id>:\n"
            f"{state.presenter.format_view(ViewName.SELECTOR)}"
        )
    task = task_api.set_focus_task(state, args[0])
    return "" if task is None else state.timer.status_line()


def cmd_timer(state: AppState, args: list[str]) -> str:
    """
    /timer [status]      -> show timer
    /timer start|pause|reset
    /timer study|break   -> switch session type (resets the countdown)
    """
    timer = state.timer
    sub = args[0].lower() if args else "status"

    if sub == "status":
        return timer.status_line()
    if sub == "start":
        return timer.status_line() if timer.start() else "Timer is already running."
    if sub == "pause":
        return timer.status_line() if timer.pause() else "Timer is not running."
    if sub == "reset":
        timer.reset()
        return timer.status_line()
    if sub in ("study", "break"):
        timer.set_type(sub)
        return timer.status_line()

    return "Usage: /timer start | pause | reset | study | break | status"


def cmd_prefs(state: AppState, args: list[str]) -> str:
    """/prefs study 30 break 10"""
    if not args:
        p = state.preferences
        return f"Preferences: study {p.study_duration} min, break {p.break_duration} min."

    values: dict[str, int] = {}
    it = iter(args)
    for key in it:
        raw = next(it, None)
        key = key.lower()
        if key not in ("study", "break") or raw is None:
            return "Usage: /prefs [study <minutes>] [break <minutes>]"
        try:
            values[key] = int(raw)
        except ValueError:
            return f"Not a number of minutes: {raw}"

    prefs = task_api.save_preferences(
        state,
        study_duration=values.get("study"),
        break_duration=values.get("break"),
    )
    return f"Preferences: study {prefs.study_duration} min, break {prefs.break_duration} min."


def cmd_sync(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /sync push -> mirror local tasks to Google Tasks
    /sync pull -> import Google tasks not seen before
    """
    sub = args[0].lower() if args else ""
    if sub not in ("push", "pull"):
        return "Usage: /sync push | /sync pull"

    if emit:
        emit("[SYNC] Talking to Google Tasks...")

    if sub == "push":
        task_api.sync_push(state)
        return ""
    task_api.sync_pull(state)
    return _primary(state)


def cmd_reload(state: AppState, args: list[str]) -> str:
    state.store.load()
    return _primary(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task counts, filter, storage, sync and timer.")
registry.register("list", cmd_list, help_text="Show tasks matching the current filter.", aliases=["ls"])
registry.register("dash", cmd_dash, help_text="Show the top priority tasks and the timer.")
registry.register(
    "save",
    cmd_save,
    help_text="Create (or update while editing): /save title | notes | YYYY-MM-DD | high|medium|low.",
    aliases=["add", "new"],
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id>, then /save.")
registry.register("cancel", cmd_cancel, help_text="Leave edit mode without saving.")
registry.register("done", cmd_toggle, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_delete, help_text="Delete a task: /rm <id> yes.", aliases=["delete"])
registry.register("filter", cmd_filter, help_text="Filter tasks: /filter all | pending | completed | high.")
registry.register("focus", cmd_focus, help_text="Focus the study timer on a task: /focus <id>.")
registry.register("timer", cmd_timer, help_text="Study timer: /timer start | pause | reset | study | break.")
registry.register("prefs", cmd_prefs, help_text="Timer durations: /prefs study <min> break <min>.")
registry.register("sync", cmd_sync, help_text="Google Tasks: /sync push | /sync pull.")
registry.register("reload", cmd_reload, help_text="Reload tasks from storage.")
