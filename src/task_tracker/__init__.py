"""Task tracker: tasks, epics and subtasks with history, scheduling and a flat-file store."""

__version__ = "0.1.0"
