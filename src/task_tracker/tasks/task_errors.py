# src/task_tracker/tasks/task_errors.py

"""
Error kinds raised by the task subsystem.

Callers (console, any future transport) only need the kind:
- NotFoundError      -> lookup/delete of a missing id
- ValidationError    -> bad input, missing start time or parent, overlap
- PersistenceError   -> save/load failures (ManagerSaveError / ManagerLoadError)
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for every error the engine raises on purpose."""


class NotFoundError(TaskTrackerError, LookupError):
    pass


class ValidationError(TaskTrackerError, ValueError):
    pass


class OverlapError(ValidationError):
    """The candidate's time window intersects an already scheduled task."""

    def __init__(self, conflicting_id: int) -> None:
        super().__init__(
            f"There is an intersection in execution time with task number={conflicting_id}"
        )
        self.conflicting_id = conflicting_id


class PersistenceError(TaskTrackerError):
    pass


class ManagerSaveError(PersistenceError):
    pass


class ManagerLoadError(PersistenceError):
    pass
