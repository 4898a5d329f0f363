# tests/test_study_timer.py

from __future__ import annotations

import asyncio

import pytest

from radzz.core.errors import ValidationError
from radzz.storage.preferences import Preferences
from radzz.tasks.task_models import NotifyLevel, Task
from radzz.timer.study_timer import (
    FINISH_MESSAGES,
    StudyTimer,
    TimerType,
    format_clock,
    run_study_timer,
)
from radzz.timer.timer_runner import start_timer_in_background

from .fakes import FakeClock, FakePresenter


def test_format_clock() -> None:
    assert format_clock(25 * 60) == "25:00"
    assert format_clock(61.4) == "01:01"
    assert format_clock(-5) == "00:00"


def test_countdown_pause_and_resume(clock: FakeClock) -> None:
    timer = StudyTimer(Preferences(study_duration=1, break_duration=1), clock=clock)
    assert timer.display() == "01:00"
    assert timer.start() is True
    assert timer.start() is False

    clock.advance(20)
    assert timer.pause() is True
    assert timer.pause() is False
    assert timer.display() == "00:40"

    clock.advance(100)
    assert timer.display() == "00:40"

    timer.start()
    clock.advance(10)
    assert timer.display() == "00:30"
    assert timer.poll() is None


def test_poll_reports_finish_once_and_switches_type(clock: FakeClock) -> None:
    timer = StudyTimer(Preferences(study_duration=1, break_duration=2), clock=clock)
    timer.start()
    clock.advance(61)

    assert timer.poll() is TimerType.STUDY
    assert timer.poll() is None
    assert timer.timer_type is TimerType.BREAK
    assert not timer.is_running
    assert timer.display() == "02:00"


def test_set_type_resets_and_rejects_unknown(clock: FakeClock) -> None:
    timer = StudyTimer(Preferences(study_duration=25, break_duration=5), clock=clock)
    timer.start()
    clock.advance(30)

    assert timer.set_type("Break") is TimerType.BREAK
    assert not timer.is_running
    assert timer.display() == "05:00"

    with pytest.raises(ValidationError):
        timer.set_type("nap")
    assert timer.timer_type is TimerType.BREAK


def test_preferences_apply_only_while_paused(clock: FakeClock) -> None:
    timer = StudyTimer(clock=clock)
    timer.set_preferences(Preferences(study_duration=50, break_duration=10))
    assert timer.display() == "50:00"

    timer.start()
    timer.set_preferences(Preferences(study_duration=10, break_duration=10))
    assert timer.display() == "50:00"

    timer.reset()
    assert timer.display() == "10:00"


def test_status_line_mentions_focus_task(clock: FakeClock) -> None:
    timer = StudyTimer(clock=clock)
    assert timer.status_line() == "Study 25:00 (paused)"

    timer.set_focus_task(Task(id="t1", title="Essay"))
    timer.start()
    assert timer.status_line() == "Study 25:00 (running) - focus: Essay"


@pytest.mark.asyncio
async def test_run_study_timer_notifies_and_stops(clock: FakeClock) -> None:
    timer = StudyTimer(Preferences(study_duration=1, break_duration=1), clock=clock)
    presenter = FakePresenter()
    stop = asyncio.Event()

    timer.start()
    clock.advance(60)

    task = asyncio.create_task(
        run_study_timer(timer, presenter, interval_seconds=0.01, stop_event=stop)
    )
    for _ in range(100):
        if presenter.notifications:
            break
        await asyncio.sleep(0.01)

    stop.set()
    await asyncio.wait_for(task, timeout=1.0)

    assert presenter.notifications == [(FINISH_MESSAGES[TimerType.STUDY], NotifyLevel.SUCCESS)]
    assert timer.timer_type is TimerType.BREAK


@pytest.mark.asyncio
async def test_run_study_timer_survives_presenter_errors(clock: FakeClock) -> None:
    class Broken(FakePresenter):
        def notify(self, message: str, level: NotifyLevel) -> None:
            super().notify(message, level)
            raise RuntimeError("display gone")

    timer = StudyTimer(Preferences(study_duration=1, break_duration=1), clock=clock)
    presenter = Broken()
    timer.start()
    clock.advance(60)

    task = asyncio.create_task(run_study_timer(timer, presenter, interval_seconds=0.01))
    await asyncio.sleep(0.05)
    assert not task.done()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert len(presenter.notifications) == 1


def test_background_runner_respects_switch_and_stops(state) -> None:
    assert start_timer_in_background(state) is None

    state.settings.timer_enabled = True
    runner = start_timer_in_background(state)
    assert runner is not None
    assert runner.thread.is_alive()

    runner.stop()
    runner.join(timeout=2.0)
    assert not runner.thread.is_alive()
