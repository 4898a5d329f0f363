# src/radzz/timer/study_timer.py

from __future__ import annotations

"""
Study timer.

A countdown that alternates between study and break sessions. Time is
derived from a monotonic clock (injectable for tests) rather than from
tick counting, so a late poll never drifts the remaining time.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from enum import StrEnum

from ..core.errors import ValidationError
from ..core.ports import Presenter
from ..storage.preferences import Preferences
from ..tasks.task_models import NotifyLevel, Task

logger = logging.getLogger(__name__)


class TimerType(StrEnum):
    STUDY = "study"
    BREAK = "break"

    def other(self) -> TimerType:
        return TimerType.BREAK if self is TimerType.STUDY else TimerType.STUDY


FINISH_MESSAGES: dict[TimerType, str] = {
    TimerType.STUDY: "Study session complete! Time for a break.",
    TimerType.BREAK: "Break is over! Back to studying.",
}


def format_clock(seconds: float) -> str:
    total = max(0, int(round(seconds)))
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"


class StudyTimer:
    """
    Thread-safe: the console thread drives start/pause/reset while the
    background loop calls poll().
    """

    def __init__(
        self,
        prefs: Preferences | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._prefs = prefs or Preferences()
        self._clock = clock
        self._lock = threading.Lock()

        self._type = TimerType.STUDY
        self._remaining = float(self._duration(self._type))
        self._started_at: float | None = None
        self._focus_task: Task | None = None

    # ---- state ----

    @property
    def timer_type(self) -> TimerType:
        return self._type

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    @property
    def focus_task(self) -> Task | None:
        return self._focus_task

    def _duration(self, timer_type: TimerType) -> int:
        minutes = (
            self._prefs.study_duration if timer_type is TimerType.STUDY else self._prefs.break_duration
        )
        return int(minutes) * 60

    def _remaining_locked(self) -> float:
        if self._started_at is None:
            return self._remaining
        return max(0.0, self._remaining - (self._clock() - self._started_at))

    def remaining_seconds(self) -> float:
        with self._lock:
            return self._remaining_locked()

    def display(self) -> str:
        return format_clock(self.remaining_seconds())

    # ---- controls ----

    def start(self) -> bool:
        with self._lock:
            if self._started_at is not None:
                return False
            if self._remaining <= 0:
                self._remaining = float(self._duration(self._type))
            self._started_at = self._clock()
        logger.debug("Timer started type=%s", self._type.value)
        return True

    def pause(self) -> bool:
        with self._lock:
            if self._started_at is None:
                return False
            self._remaining = self._remaining_locked()
            self._started_at = None
        logger.debug("Timer paused remaining=%.1f", self._remaining)
        return True

    def reset(self) -> None:
        with self._lock:
            self._started_at = None
            self._remaining = float(self._duration(self._type))

    def set_type(self, value: str | TimerType) -> TimerType:
        try:
            timer_type = TimerType(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown timer type: {value!r} (use study or break)") from None
        with self._lock:
            self._type = timer_type
            self._started_at = None
            self._remaining = float(self._duration(timer_type))
        return timer_type

    def set_preferences(self, prefs: Preferences) -> None:
        """New durations apply immediately unless a countdown is running."""
        with self._lock:
            self._prefs = prefs
            if self._started_at is None:
                self._remaining = float(self._duration(self._type))

    def set_focus_task(self, task: Task | None) -> None:
        self._focus_task = task

    def poll(self) -> TimerType | None:
        """
        Returns the finished session type exactly once when the countdown
        hits zero; the timer then stops and switches to the other type.
        """
        with self._lock:
            if self._started_at is None or self._remaining_locked() > 0:
                return None
            finished = self._type
            self._type = finished.other()
            self._started_at = None
            self._remaining = float(self._duration(self._type))
        return finished

    def status_line(self) -> str:
        state = "running" if self.is_running else "paused"
        line = f"{self._type.value.title()} {self.display()} ({state})"
        if self._focus_task is not None:
            line += f" - focus: {self._focus_task.title}"
        return line


async def run_study_timer(
    timer: StudyTimer,
    presenter: Presenter,
    *,
    interval_seconds: float = 1.0,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Polling loop: every interval_seconds ask the timer whether a session
    finished and tell the presenter.

    Stops when stop_event is set, or when the coroutine/task is cancelled.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while stop_event is None or not stop_event.is_set():
        try:
            finished = timer.poll()
        except Exception:
            logger.exception("Timer poll failed")
            finished = None

        if finished is not None:
            logger.info("Timer session finished type=%s", finished.value)
            try:
                presenter.notify(FINISH_MESSAGES[finished], NotifyLevel.SUCCESS)
            except Exception:
                logger.exception("Timer notification failed")

        await asyncio.sleep(sleep_s)
