# src/task_tracker/core/ports.py

"""
Ports (interfaces) used by the front-ends.

Front-ends depend on this Protocol instead of the concrete manager, so the
in-memory and file-backed engines are interchangeable (and easy to fake).
"""

from __future__ import annotations

from typing import Protocol

from ..tasks.task_models import Epic, SubTask, Task


class TaskGraph(Protocol):
    """Public surface of the task engine."""

    # Task
    def create_task(self, task: Task) -> int: ...
    def update_task(self, task: Task) -> int: ...
    def get_task(self, task_id: int) -> Task: ...
    def get_tasks(self) -> list[Task]: ...
    def delete_task(self, task_id: int) -> None: ...
    def delete_tasks(self) -> None: ...

    # SubTask
    def create_subtask(self, subtask: SubTask) -> int: ...
    def update_subtask(self, subtask: SubTask) -> int: ...
    def get_subtask(self, subtask_id: int) -> SubTask: ...
    def get_subtasks(self) -> list[SubTask]: ...
    def delete_subtask(self, subtask_id: int) -> None: ...
    def delete_subtasks(self) -> None: ...

    # Epic
    def create_epic(self, epic: Epic) -> int: ...
    def update_epic(self, epic: Epic) -> int: ...
    def get_epic(self, epic_id: int) -> Epic: ...
    def get_epics(self) -> list[Epic]: ...
    def get_subtasks_of_epic(self, epic_id: int) -> list[SubTask]: ...
    def delete_epic(self, epic_id: int) -> None: ...
    def delete_epics(self) -> None: ...

    # Views
    def get_history(self) -> list[Task]: ...
    def get_prioritized_tasks(self) -> list[Task]: ...
