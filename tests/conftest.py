# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tracker.core.state import AppState
from task_tracker.tasks.file_backed import FileBackedTaskManager
from task_tracker.tasks.task_manager import TaskManager


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasks-test",
        log_level="DEBUG",
        persist=True,
        data_dir=tmp_path,
        tasks_file_path=tmp_path / "tasks.csv",
        console_enabled=False,
    )


@pytest.fixture()
def manager() -> TaskManager:
    return TaskManager()


@pytest.fixture()
def file_manager(settings: SimpleNamespace) -> FileBackedTaskManager:
    return FileBackedTaskManager(settings.tasks_file_path)


@pytest.fixture()
def state(settings: SimpleNamespace, file_manager: FileBackedTaskManager) -> AppState:
    """AppState wired with a real file-backed engine in tmp_path."""
    return AppState(settings=settings, tasks=file_manager)
