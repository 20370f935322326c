# src/task_tracker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the engine (file-backed unless TASKS_PERSIST is
off), runs the console REPL in the main thread, then flushes once more on the
way out in case the last save failed.
"""

from __future__ import annotations

import logging
import sys

from ..config import get_settings
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.file_backed import FileBackedTaskManager
from ..tasks.task_errors import ManagerLoadError, ManagerSaveError
from .bootstrap import create_initial_state
from .console import run_console_loop

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    tasks = state.tasks
    if not isinstance(tasks, FileBackedTaskManager):
        return
    with state.lock:
        try:
            tasks.save()
        except ManagerSaveError:
            logger.exception("Final save to %s failed; recent changes are lost.", tasks.path)


def main() -> int:
    settings = get_settings()
    log_file = setup_logging(log_dir=settings.data_dir, console_level=settings.log_level_no)
    logger.info("Starting %s (log file %s)...", settings.app_name, log_file)

    try:
        state = create_initial_state(settings=settings)
    except ManagerLoadError:
        logger.exception("Task file %s could not be loaded; refusing to start.", settings.tasks_file_path)
        return 1

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        _shutdown(state)
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
