# src/task_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Minimum level a record needs to reach the console, by logger-name prefix.
# Longest matching prefix wins; unmatched names fall back to ERROR.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "task_tracker.": logging.NOTSET,
    "task_tracker.tasks.file_backed": logging.WARNING,
    "py.warnings": logging.ERROR,
}


class _ConsoleNoiseFilter(logging.Filter):
    """Drops per-save chatter and third-party noise from the interactive console."""

    def filter(self, record: logging.LogRecord) -> bool:
        best = ""
        for prefix in _CONSOLE_THRESHOLDS:
            if record.name.startswith(prefix) and len(prefix) > len(best):
                best = prefix
        threshold = _CONSOLE_THRESHOLDS[best] if best else logging.ERROR
        return record.levelno >= threshold


def _handler(handler: logging.Handler, level: int, fmt: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasks",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route everything to <log_dir>/tasks.log and a filtered view to stderr.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / "tasks.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(min(console_level, file_level))

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = _handler(logging.StreamHandler(sys.stderr), console_level, fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)
    root.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, fmt))

    # warnings.warn(...) ends up under "py.warnings"
    logging.captureWarnings(True)
    return log_file
