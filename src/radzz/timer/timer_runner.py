# src/radzz/timer/timer_runner.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.state import AppState
from .study_timer import run_study_timer

logger = logging.getLogger(__name__)


@dataclass
class TimerBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Failed to signal timer stop (loop closed).", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_timer_in_background(state: AppState) -> TimerBackgroundRunner | None:
    """
    Run the study timer loop in a background thread.

    The console REPL blocks on input(), so the timer gets its own event loop.
    """
    if not state.settings.timer_enabled:
        logger.info("Study timer loop disabled, not starting.")
        return None

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_study_timer(
                    state.timer,
                    state.presenter,
                    interval_seconds=state.settings.timer_tick_seconds,
                    stop_event=stop_event,
                )
            )
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="radzz-timer", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Timer thread did not initialize properly.")
        return None

    logger.info("Study timer background thread started.")
    return TimerBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
