# src/task_tracker/tasks/task_manager.py

"""
In-memory task graph engine.

Owns:
- the TaskStore (tasks/epics/subtasks maps + id counter),
- the PriorityIndex of scheduled Tasks/SubTasks,
- the HistoryTracker of viewed entities.

Every operation validates first and mutates after, so a raised error leaves
state untouched. Subclasses hook persistence in via _changed().
"""

from __future__ import annotations

import logging
from datetime import timedelta

from .history import HistoryTracker
from .priority import PriorityIndex
from .task_errors import NotFoundError, OverlapError, ValidationError
from .task_models import Epic, SubTask, Task, TaskStatus, TaskType
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskManager:
    def __init__(
        self,
        store: TaskStore | None = None,
        *,
        index: PriorityIndex | None = None,
        history: HistoryTracker | None = None,
    ) -> None:
        self._store = store if store is not None else TaskStore()
        self._index = index if index is not None else PriorityIndex()
        self._history = history if history is not None else HistoryTracker()

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def history(self) -> HistoryTracker:
        return self._history

    def next_id(self) -> int:
        return self._store.next_id()

    def _changed(self) -> None:
        """Called after every successful state change (including history views)."""

    # ---- validation ----

    @staticmethod
    def _require(task: Task | None, kind: TaskType) -> Task:
        label = kind.value.capitalize() if kind is not TaskType.SUBTASK else "SubTask"
        if task is None:
            raise ValidationError(f"{label} cannot be null.")
        if task.task_type is not kind:
            raise ValidationError(f"Expected {kind.value}, got {task.task_type.value}.")
        return task

    def _validate_schedulable(self, task: Task, *, exclude_id: int | None) -> None:
        if task.start_time is None:
            raise ValidationError("StartTime cannot be null.")
        if task.start_time.tzinfo is not None:
            raise ValidationError("StartTime must be a local date-time without a UTC offset.")
        # Whole minutes only: the file format has no finer unit.
        if task.duration is None or task.duration < timedelta(0):
            raise ValidationError("Duration must be zero or positive.")
        if task.duration % timedelta(minutes=1):
            raise ValidationError("Duration must be a whole number of minutes.")
        conflict = self._index.find_conflict(task, exclude_id=exclude_id)
        if conflict is not None:
            raise OverlapError(conflict.id)

    def _require_epic(self, epic_id: int) -> Epic:
        epic = self._store.epics.get(epic_id)
        if epic is None:
            raise ValidationError(f"Epic with id {epic_id} not found.")
        return epic

    def _refresh_epic(self, epic: Epic) -> None:
        epic.refresh(self.get_subtasks_of_epic(epic.id))

    # ---- Task ----

    def create_task(self, task: Task) -> int:
        self._require(task, TaskType.TASK)
        self._validate_schedulable(task, exclude_id=None)

        task.id = self._store.next_id()
        task.status = TaskStatus.NEW
        self._store.tasks[task.id] = task
        self._index.add(task)
        logger.debug("Task created id=%s start=%s", task.id, task.start_time)
        self._changed()
        return task.id

    def update_task(self, task: Task) -> int:
        self._require(task, TaskType.TASK)
        if task.id not in self._store.tasks:
            logger.debug("update_task: id=%s absent, creating", task.id)
            return self.create_task(task)
        self._validate_schedulable(task, exclude_id=task.id)

        self._index.remove(task.id)
        self._store.tasks[task.id] = task
        self._index.add(task)
        self._history.replace(task)
        logger.debug("Task updated id=%s status=%s", task.id, task.status)
        self._changed()
        return task.id

    def get_task(self, task_id: int) -> Task:
        task = self._store.tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task with id {task_id} not found.")
        self._history.add(task)
        self._changed()
        return task

    def get_tasks(self) -> list[Task]:
        return list(self._store.tasks.values())

    def delete_task(self, task_id: int) -> None:
        if task_id not in self._store.tasks:
            raise NotFoundError(f"Task with id {task_id} not found.")
        del self._store.tasks[task_id]
        self._index.remove(task_id)
        self._history.remove(task_id)
        logger.debug("Task deleted id=%s", task_id)
        self._changed()

    def delete_tasks(self) -> None:
        for task_id in self._store.tasks:
            self._index.remove(task_id)
            self._history.remove(task_id)
        self._store.tasks.clear()
        logger.debug("All tasks deleted")
        self._changed()

    # ---- SubTask ----

    def create_subtask(self, subtask: SubTask) -> int:
        self._require(subtask, TaskType.SUBTASK)
        self._validate_schedulable(subtask, exclude_id=None)
        epic = self._require_epic(subtask.epic_id)

        subtask.id = self._store.next_id()
        subtask.status = TaskStatus.NEW
        self._store.subtasks[subtask.id] = subtask
        self._index.add(subtask)
        epic.add_subtask_id(subtask.id)
        self._refresh_epic(epic)
        logger.debug("SubTask created id=%s epic=%s", subtask.id, epic.id)
        self._changed()
        return subtask.id

    def update_subtask(self, subtask: SubTask) -> int:
        self._require(subtask, TaskType.SUBTASK)
        original = self._store.subtasks.get(subtask.id)
        if original is None:
            logger.debug("update_subtask: id=%s absent, creating", subtask.id)
            return self.create_subtask(subtask)

        epic = self._require_epic(subtask.epic_id)
        if original.epic_id != subtask.epic_id:
            raise ValidationError(
                f"SubTask {subtask.id} belongs to epic {original.epic_id} and cannot be moved."
            )
        self._validate_schedulable(subtask, exclude_id=subtask.id)

        self._index.remove(subtask.id)
        self._store.subtasks[subtask.id] = subtask
        self._index.add(subtask)
        self._history.replace(subtask)
        self._refresh_epic(epic)
        logger.debug("SubTask updated id=%s status=%s", subtask.id, subtask.status)
        self._changed()
        return subtask.id

    def get_subtask(self, subtask_id: int) -> SubTask:
        subtask = self._store.subtasks.get(subtask_id)
        if subtask is None:
            raise NotFoundError(f"SubTask with id {subtask_id} not found.")
        self._history.add(subtask)
        self._changed()
        return subtask

    def get_subtasks(self) -> list[SubTask]:
        return list(self._store.subtasks.values())

    def delete_subtask(self, subtask_id: int) -> None:
        subtask = self._store.subtasks.get(subtask_id)
        if subtask is None:
            raise NotFoundError(f"SubTask with id {subtask_id} not found.")

        del self._store.subtasks[subtask_id]
        self._index.remove(subtask_id)
        self._history.remove(subtask_id)
        epic = self._store.epics.get(subtask.epic_id)
        if epic is not None:
            epic.remove_subtask_id(subtask_id)
            self._refresh_epic(epic)
        logger.debug("SubTask deleted id=%s epic=%s", subtask_id, subtask.epic_id)
        self._changed()

    def delete_subtasks(self) -> None:
        for subtask_id in self._store.subtasks:
            self._index.remove(subtask_id)
            self._history.remove(subtask_id)
        self._store.subtasks.clear()
        for epic in self._store.epics.values():
            epic.clear_subtask_ids()
            self._refresh_epic(epic)
        logger.debug("All subtasks deleted")
        self._changed()

    def get_subtasks_of_epic(self, epic_id: int) -> list[SubTask]:
        """Live subtasks of an epic in insertion order; dangling ids are skipped."""
        epic = self._store.epics.get(epic_id)
        if epic is None:
            return []
        out: list[SubTask] = []
        for subtask_id in epic.subtask_ids:
            subtask = self._store.subtasks.get(subtask_id)
            if subtask is not None:
                out.append(subtask)
        return out

    # ---- Epic ----

    def create_epic(self, epic: Epic) -> int:
        self._require(epic, TaskType.EPIC)

        epic.id = self._store.next_id()
        epic.clear_subtask_ids()
        epic.refresh([])
        self._store.epics[epic.id] = epic
        logger.debug("Epic created id=%s", epic.id)
        self._changed()
        return epic.id

    def update_epic(self, epic: Epic) -> int:
        """Only name and description are taken from the caller."""
        self._require(epic, TaskType.EPIC)
        original = self._store.epics.get(epic.id)
        if original is None:
            logger.debug("update_epic: id=%s absent, creating", epic.id)
            return self.create_epic(epic)

        original.name = epic.name
        original.description = epic.description
        logger.debug("Epic updated id=%s", epic.id)
        self._changed()
        return original.id

    def get_epic(self, epic_id: int) -> Epic:
        epic = self._store.epics.get(epic_id)
        if epic is None:
            raise NotFoundError(f"Epic with id {epic_id} not found.")
        self._history.add(epic)
        self._changed()
        return epic

    def get_epics(self) -> list[Epic]:
        return list(self._store.epics.values())

    def delete_epic(self, epic_id: int) -> None:
        epic = self._store.epics.get(epic_id)
        if epic is None:
            raise NotFoundError(f"Epic with id {epic_id} not found.")

        for subtask_id in epic.subtask_ids:
            self._store.subtasks.pop(subtask_id, None)
            self._index.remove(subtask_id)
            self._history.remove(subtask_id)
        del self._store.epics[epic_id]
        self._history.remove(epic_id)
        logger.debug("Epic deleted id=%s subtasks=%s", epic_id, len(epic.subtask_ids))
        self._changed()

    def delete_epics(self) -> None:
        for subtask_id in self._store.subtasks:
            self._index.remove(subtask_id)
            self._history.remove(subtask_id)
        for epic_id in self._store.epics:
            self._history.remove(epic_id)
        self._store.subtasks.clear()
        self._store.epics.clear()
        logger.debug("All epics deleted")
        self._changed()

    # ---- views ----

    def get_history(self) -> list[Task]:
        return self._history.get_history()

    def get_prioritized_tasks(self) -> list[Task]:
        return self._index.get_prioritized()
