# src/task_tracker/tasks/file_backed.py

from __future__ import annotations

import logging
import os
from pathlib import Path

from .history import HistoryTracker
from .priority import PriorityIndex
from .task_codec import dump_state, load_state
from .task_errors import ManagerLoadError, ManagerSaveError
from .task_manager import TaskManager
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class FileBackedTaskManager(TaskManager):
    """
    TaskManager that rewrites its flat file after every successful change.

    A failed save raises ManagerSaveError but keeps the in-memory change;
    the next successful save brings the file back in line.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        store: TaskStore | None = None,
        index: PriorityIndex | None = None,
        history: HistoryTracker | None = None,
    ) -> None:
        super().__init__(store, index=index, history=history)
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @classmethod
    def load(cls, path: str | Path) -> FileBackedTaskManager:
        """
        Build a manager from the file at path.

        A missing file means a fresh start. Anything unreadable or malformed
        raises ManagerLoadError and no manager is created.
        """
        path = Path(path)
        if not path.exists():
            logger.info("No task file at %s; starting empty", path)
            return cls(path)

        try:
            text = path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManagerLoadError(f"Error while loading tasks from {path}: {exc}") from exc

        state = load_state(text)
        manager = cls(path, store=state.store, index=state.index, history=state.history)
        logger.info(
            "Loaded tasks from %s: total=%s history=%s last_id=%s",
            path,
            state.store.count(),
            len(state.history),
            state.store.last_id,
        )
        return manager

    def _changed(self) -> None:
        self.save()

    def save(self) -> None:
        text = dump_state(self.store, self.history)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, "utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            logger.error("Failed to save tasks to %s: %s", self._path, exc)
            raise ManagerSaveError(f"Error while saving tasks to {self._path}: {exc}") from exc
        logger.debug("Saved tasks to %s: total=%s", self._path, self.store.count())
