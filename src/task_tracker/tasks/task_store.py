# src/task_tracker/tasks/task_store.py

from __future__ import annotations

from dataclasses import dataclass, field

from .task_models import Epic, SubTask, Task


@dataclass(slots=True)
class TaskStore:
    """
    Engine state: three id-keyed maps and the shared id counter.

    The counter is global across Task/Epic/SubTask and only moves forward,
    so ids are never reused after a delete.
    """

    tasks: dict[int, Task] = field(default_factory=dict)
    epics: dict[int, Epic] = field(default_factory=dict)
    subtasks: dict[int, SubTask] = field(default_factory=dict)
    last_id: int = 0

    def next_id(self) -> int:
        self.last_id += 1
        return self.last_id

    def bump_id(self, seen_id: int) -> None:
        """Make sure future ids are greater than seen_id."""
        if seen_id > self.last_id:
            self.last_id = seen_id

    def find(self, task_id: int) -> Task | None:
        """Look an id up across all three maps."""
        return self.tasks.get(task_id) or self.subtasks.get(task_id) or self.epics.get(task_id)

    def all_entities(self) -> list[Task]:
        return [*self.tasks.values(), *self.epics.values(), *self.subtasks.values()]

    def count(self) -> int:
        return len(self.tasks) + len(self.epics) + len(self.subtasks)
