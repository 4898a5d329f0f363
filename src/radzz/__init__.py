"""Radzz study dashboard: task list, Google Tasks sync and a study timer."""

__version__ = "0.1.0"
