# src/task_tracker/tasks/priority.py

from __future__ import annotations

import bisect
from datetime import datetime

from .task_errors import ValidationError
from .task_models import Task

_SortKey = tuple[datetime, int]


def overlaps(first: Task, second: Task) -> bool:
    """
    Closed-interval intersection test.

    Windows that only touch (first.end == second.start) count as overlapping.
    """
    if first.start_time is None or second.start_time is None:
        return False
    first_end = first.end_time or first.start_time
    second_end = second.end_time or second.start_time
    return first.start_time <= second_end and second.start_time <= first_end


class PriorityIndex:
    """
    Scheduled Tasks/SubTasks ordered by start time (ties by id).

    Entries are tracked by id, so remove() works even when the caller has
    already mutated the stored instance's start_time.
    """

    def __init__(self) -> None:
        self._keys: list[_SortKey] = []
        self._by_key: dict[_SortKey, Task] = {}
        self._key_of: dict[int, _SortKey] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._key_of

    def add(self, task: Task) -> None:
        if task.start_time is None:
            raise ValidationError(f"Task {task.id} has no start time and cannot be scheduled.")
        self.remove(task.id)
        key = (task.start_time, task.id)
        bisect.insort(self._keys, key)
        self._by_key[key] = task
        self._key_of[task.id] = key

    def remove(self, task_id: int) -> None:
        key = self._key_of.pop(task_id, None)
        if key is None:
            return
        idx = bisect.bisect_left(self._keys, key)
        if idx < len(self._keys) and self._keys[idx] == key:
            del self._keys[idx]
        self._by_key.pop(key, None)

    def clear(self) -> None:
        self._keys.clear()
        self._by_key.clear()
        self._key_of.clear()

    def get_prioritized(self) -> list[Task]:
        return [self._by_key[k] for k in self._keys]

    def find_conflict(self, task: Task, *, exclude_id: int | None = None) -> Task | None:
        """First indexed task (other than exclude_id) whose window overlaps task's."""
        for saved in self.get_prioritized():
            if exclude_id is not None and saved.id == exclude_id:
                continue
            if overlaps(task, saved):
                return saved
        return None
