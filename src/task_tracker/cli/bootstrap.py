# src/task_tracker/cli/bootstrap.py

"""
Composition root: turns Settings into a ready AppState.

With persistence on, the data directory is created and the engine is loaded
from the task file (a missing file is a fresh start). With it off, the engine
lives in memory only.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskGraph
from ..core.state import AppState
from ..tasks.file_backed import FileBackedTaskManager
from ..tasks.task_manager import TaskManager

logger = logging.getLogger(__name__)


def _build_engine(settings) -> TaskGraph:
    if not settings.persist:
        logger.info("Persistence disabled; tasks live in memory only.")
        return TaskManager()

    path = settings.tasks_file_path
    for directory in {settings.data_dir, path.parent}:
        directory.mkdir(parents=True, exist_ok=True)
    return FileBackedTaskManager.load(path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Build AppState from settings (get_settings() when None).

    Raises ManagerLoadError for an unreadable or corrupt task file; the app
    must not start on half-loaded state.
    """
    if settings is None:
        settings = get_settings()
    return AppState(settings=settings, tasks=_build_engine(settings))
