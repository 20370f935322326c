# src/task_tracker/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from .ports import TaskGraph


@dataclass(slots=True)
class AppState:
    """
    Everything a front-end needs.

    The engine is not thread-safe: epic rollups and index updates are
    multi-step, so every call into `tasks` must hold `lock`.
    """

    # Settings object (config.Settings or a test stand-in).
    settings: Any
    tasks: TaskGraph
    lock: threading.RLock = field(default_factory=threading.RLock)
