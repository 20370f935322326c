# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def parse(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.NEW
        return cls(raw.strip().upper())


class TaskType(StrEnum):
    TASK = "TASK"
    EPIC = "EPIC"
    SUBTASK = "SUBTASK"


@dataclass(eq=False, slots=True)
class Task:
    """
    Atomic unit of work.

    end_time is kept in step with start_time/duration on every assignment,
    so it is always readable right after a write.
    Identity is the id: two tasks with the same id compare equal.
    """

    name: str
    description: str = ""
    status: TaskStatus = TaskStatus.NEW
    duration: timedelta | None = timedelta(0)
    start_time: datetime | None = None
    id: int = 0
    end_time: datetime | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        # __init__ assigns end_time after start_time/duration.
        self._recompute_end_time()

    def __setattr__(self, name: str, value: object) -> None:
        object.__setattr__(self, name, value)
        if name in ("start_time", "duration"):
            self._recompute_end_time()

    def _recompute_end_time(self) -> None:
        start = getattr(self, "start_time", None)
        duration = getattr(self, "duration", None)
        if start is None:
            object.__setattr__(self, "end_time", None)
        else:
            object.__setattr__(self, "end_time", start + (duration or timedelta(0)))

    @property
    def task_type(self) -> TaskType:
        return TaskType.TASK

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(eq=False, slots=True)
class SubTask(Task):
    """A Task owned by exactly one Epic."""

    epic_id: int = 0

    @property
    def task_type(self) -> TaskType:
        return TaskType.SUBTASK


@dataclass(eq=False, slots=True)
class Epic(Task):
    """
    Grouping task.

    status, start_time, duration and end_time are rollups of the subtasks and
    are written only through refresh(); the manager never routes caller
    values into them.
    """

    duration: timedelta | None = None
    subtask_ids: list[int] = field(default_factory=list)

    def _recompute_end_time(self) -> None:
        # The window end is the latest subtask end, not start + duration.
        return

    @property
    def task_type(self) -> TaskType:
        return TaskType.EPIC

    def add_subtask_id(self, subtask_id: int) -> None:
        if subtask_id not in self.subtask_ids:
            self.subtask_ids.append(subtask_id)

    def remove_subtask_id(self, subtask_id: int) -> None:
        if subtask_id in self.subtask_ids:
            self.subtask_ids.remove(subtask_id)

    def clear_subtask_ids(self) -> None:
        self.subtask_ids.clear()

    def refresh(self, subtasks: list[SubTask]) -> None:
        """
        Recompute status and time window from the given (live) subtasks.

        - no subtasks or all NEW -> NEW
        - all DONE               -> DONE
        - anything else          -> IN_PROGRESS
        Window is [min start, max end]; duration is the sum of durations.
        With no subtasks the window and duration are unset.
        """
        statuses = {s.status for s in subtasks}
        if not subtasks or statuses == {TaskStatus.NEW}:
            self.status = TaskStatus.NEW
        elif statuses == {TaskStatus.DONE}:
            self.status = TaskStatus.DONE
        else:
            self.status = TaskStatus.IN_PROGRESS

        scheduled = [s for s in subtasks if s.start_time is not None]
        if not scheduled:
            self.start_time = None
            self.duration = None
            object.__setattr__(self, "end_time", None)
            return

        self.start_time = min(s.start_time for s in scheduled)
        self.duration = sum((s.duration or timedelta(0) for s in scheduled), timedelta(0))
        object.__setattr__(self, "end_time", max(s.end_time for s in scheduled))
