# src/task_tracker/cli/console.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks.task_errors import PersistenceError, TaskTrackerError
from .commands import registry as command_registry

logger = logging.getLogger(__name__)

PROMPT = "tasks> "
EXIT_COMMANDS = frozenset({"/exit", "/quit", "/q"})


def _say(text: str) -> None:
    stamp = datetime.now().astimezone().strftime("%H:%M:%S")
    print(f"[{stamp}] {text}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Run one console line under the state lock and turn engine errors into text.

    Returns None for non-command input.
    """
    try:
        with state.lock:
            return command_registry.handle(state, line)
    except PersistenceError as exc:
        # The in-memory change stands; only the file is behind.
        return f"[SAVE FAILED] {exc}"
    except TaskTrackerError as exc:
        return f"[{type(exc).__name__}] {exc}"


def _read(read_line: Callable[[str], str]) -> str | None:
    """Next stripped input line, or None once the user hangs up."""
    try:
        return read_line(PROMPT).strip()
    except EOFError:
        logger.info("Console input closed.")
    except KeyboardInterrupt:
        print()
        logger.info("Console interrupted.")
    return None


def run_console_loop(state: AppState, read_line: Callable[[str], str] = input) -> None:
    logger.info("Console started (app=%s).", getattr(state.settings, "app_name", "tasks"))
    _say("Type /help for commands, /exit to leave.")

    while (line := _read(read_line)) is not None:
        if not line:
            continue
        if line.lower() in EXIT_COMMANDS:
            logger.info("Console exit requested.")
            return

        try:
            reply = handle_line(state, line)
        except Exception:
            logger.exception("Command crashed: %s", line)
            _say("[ERROR] Command failed; details are in the log file.")
            continue

        print(reply if reply is not None else "Commands start with '/'. Type /help.")
