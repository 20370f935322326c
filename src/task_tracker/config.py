# src/task_tracker/config.py

"""
Settings for the task tracker, read once from TASKS_* environment variables.

A .env file in the working directory is loaded first (without overriding
variables already set in the process). Every value has a default, so the
app starts with an empty environment:

    TASKS_APP_NAME         tasks
    TASKS_LOG_LEVEL        INFO
    TASKS_PERSIST          true    (false: in-memory engine, nothing on disk)
    TASKS_DATA_DIR         .local/tasks
    TASKS_FILE_PATH        <data dir>/tasks.csv
    TASKS_CONSOLE_ENABLED  true
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKS"
_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv(override=False)


def _var(suffix: str) -> str | None:
    """Raw value of TASKS_<suffix>, or None when unset or blank."""
    raw = os.getenv(f"{ENV_PREFIX}_{suffix}")
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _flag(suffix: str, default: bool) -> bool:
    raw = _var(suffix)
    return default if raw is None else raw.lower() in _TRUTHY


def _path(suffix: str, default: Path) -> Path:
    raw = _var(suffix)
    return default if raw is None else Path(raw).expanduser()


def _level(suffix: str, default: str) -> str:
    name = (_var(suffix) or default).upper()
    # Unknown names fall back rather than failing at import time.
    return name if isinstance(logging.getLevelName(name), int) else default


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    log_level: str

    persist: bool
    data_dir: Path
    tasks_file_path: Path

    console_enabled: bool

    @property
    def log_level_no(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls) -> Settings:
        data_dir = _path("DATA_DIR", Path(".local/tasks"))
        return cls(
            app_name=_var("APP_NAME") or "tasks",
            log_level=_level("LOG_LEVEL", "INFO"),
            persist=_flag("PERSIST", True),
            data_dir=data_dir,
            tasks_file_path=_path("FILE_PATH", data_dir / "tasks.csv"),
            console_enabled=_flag("CONSOLE_ENABLED", True),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
