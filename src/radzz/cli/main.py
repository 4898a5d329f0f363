# src/radzz/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads tasks, then runs:
- the study timer loop in a background thread (optional),
- the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.errors import PersistenceError
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..timer.timer_runner import start_timer_in_background

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if state.sync is not None:
        try:
            state.sync.close()
        except Exception:
            logger.debug("Sync client close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        state.store.load()
    except PersistenceError:
        # Already shown by the presenter; keep going with an empty collection.
        logger.warning("Starting without stored tasks.")

    timer_runner = start_timer_in_background(state)

    try:
        run_console_loop(state)
    finally:
        if timer_runner is not None:
            timer_runner.stop()
            timer_runner.join(timeout=5.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
