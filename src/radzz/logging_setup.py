# src/radzz/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "radzz.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum level a record needs to reach the console, by logger-name prefix.
# First match wins; anything unmatched is third-party noise.
CONSOLE_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("radzz.timer.", logging.WARNING),  # polls every tick from its own thread
    ("radzz.", logging.NOTSET),
    ("py.warnings", logging.ERROR),
)
DEFAULT_CONSOLE_THRESHOLD = logging.ERROR

# Chatty HTTP stack used by the Google Tasks client.
QUIET_LOGGERS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}


def console_threshold(logger_name: str) -> int:
    for prefix, level in CONSOLE_THRESHOLDS:
        if logger_name.startswith(prefix):
            return level
    return DEFAULT_CONSOLE_THRESHOLD


class _ConsoleThresholdFilter(logging.Filter):
    """Keeps the REPL readable; the log file still gets everything."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= console_threshold(record.name)


def setup_logging(
    *,
    log_dir: str | Path = ".local/radzz",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to a filtered stderr handler and a full debug file.

    Replaces any handlers already on the root logger, so calling it twice is
    harmless. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleThresholdFilter())

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in (console, file_handler):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.captureWarnings(True)
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    return log_file
