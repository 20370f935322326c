"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Epic, SubTask, TaskStatus, TaskType)
- task_errors.py: error kinds (not found / validation / persistence)
- history.py: recency-ordered view history
- priority.py: start-time ordered index + overlap check
- task_store.py: id-keyed maps + shared id counter
- task_manager.py: in-memory engine (CRUD, epic rollups)
- task_codec.py: flat-file format
- file_backed.py: engine that persists after every change
"""

from .file_backed import FileBackedTaskManager
from .task_errors import (
    ManagerLoadError,
    ManagerSaveError,
    NotFoundError,
    OverlapError,
    PersistenceError,
    TaskTrackerError,
    ValidationError,
)
from .task_manager import TaskManager
from .task_models import Epic, SubTask, Task, TaskStatus, TaskType

__all__ = [
    "Epic",
    "FileBackedTaskManager",
    "ManagerLoadError",
    "ManagerSaveError",
    "NotFoundError",
    "OverlapError",
    "PersistenceError",
    "SubTask",
    "Task",
    "TaskManager",
    "TaskStatus",
    "TaskTrackerError",
    "TaskType",
    "ValidationError",
]
