# src/task_tracker/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.state import AppState
from ..tasks.task_errors import ValidationError
from ..tasks.task_models import Epic, SubTask, Task, TaskStatus

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /task, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Engine errors (TaskTrackerError) propagate to the caller.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as exc:
            return f"Cannot parse command: {exc}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        logger.debug("Command /%s args=%s", name, args)
        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing ----

def _parse_kv(args: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ValidationError(f"Expected key=value, got {arg!r}.")
        out[key.strip().lower()] = value
    return out


def _parse_id(raw: str | None) -> int:
    if raw is None:
        raise ValidationError("An id is required.")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Bad id: {raw!r}.") from None


def _parse_start(raw: str) -> datetime:
    try:
        start = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Bad start time (want ISO date-time): {raw!r}.") from None
    if start.tzinfo is not None:
        raise ValidationError(f"Start time must be local, without a UTC offset: {raw!r}.")
    return start


def _parse_duration(raw: str) -> timedelta:
    try:
        minutes = int(raw)
    except ValueError:
        raise ValidationError(f"Bad duration (want minutes): {raw!r}.") from None
    if minutes < 0:
        raise ValidationError("Duration cannot be negative.")
    return timedelta(minutes=minutes)


def _parse_status(raw: str) -> TaskStatus:
    try:
        return TaskStatus.parse(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(f"Bad status {raw!r}; use one of: {allowed}.") from None


# ---- formatting ----

def _fmt_ts(ts: datetime | None) -> str:
    return ts.strftime("%Y-%m-%d %H:%M") if ts is not None else "-"


def format_entity(task: Task) -> str:
    minutes = int(task.duration.total_seconds() // 60) if task.duration is not None else 0
    line = (
        f"#{task.id} [{task.task_type.value}] {task.name} ({task.status.value}) "
        f"{_fmt_ts(task.start_time)} -> {_fmt_ts(task.end_time)} {minutes}m"
    )
    if isinstance(task, SubTask):
        line += f" epic={task.epic_id}"
    if isinstance(task, Epic):
        line += f" subtasks={task.subtask_ids}"
    if task.description:
        line += f"\n    {task.description}"
    return line


def _format_list(title: str, items: list[Task]) -> str:
    if not items:
        return f"{title}: (empty)"
    return "\n".join([f"{title}:"] + [format_entity(t) for t in items])


# ---- entity commands ----

@dataclass(frozen=True, slots=True)
class _Kind:
    """Maps a console noun to the engine methods that serve it."""

    label: str
    suffix: str
    plural: str

    def call(self, state: AppState, verb: str, *args):
        return getattr(state.tasks, f"{verb}_{self.suffix}")(*args)

    def find(self, state: AppState, entity_id: int) -> Task | None:
        # Listing has no history side effect, unlike get_*.
        for item in getattr(state.tasks, f"get_{self.plural}")():
            if item.id == entity_id:
                return item
        return None


_TASK = _Kind("Task", "task", "tasks")
_SUBTASK = _Kind("SubTask", "subtask", "subtasks")
_EPIC = _Kind("Epic", "epic", "epics")


def _build(kind: _Kind, kv: dict[str, str], base: Task | None) -> Task:
    """Create a fresh entity from key=value args layered over base's fields."""
    name = kv.get("name", base.name if base else None)
    if not name:
        raise ValidationError("name= is required.")
    description = kv.get("desc", base.description if base else "")

    if kind is _EPIC:
        return Epic(name=name, description=description, id=base.id if base else 0)

    start = _parse_start(kv["start"]) if "start" in kv else (base.start_time if base else None)
    duration = (
        _parse_duration(kv["dur"]) if "dur" in kv else (base.duration if base else timedelta(0))
    )
    status = _parse_status(kv["status"]) if "status" in kv else (base.status if base else TaskStatus.NEW)
    entity_id = base.id if base else _parse_id(kv["id"]) if "id" in kv else 0

    if kind is _SUBTASK:
        if "epic" in kv:
            epic_id = _parse_id(kv["epic"])
        elif isinstance(base, SubTask):
            epic_id = base.epic_id
        else:
            raise ValidationError("epic= is required.")
        return SubTask(
            name=name,
            description=description,
            status=status,
            duration=duration,
            start_time=start,
            id=entity_id,
            epic_id=epic_id,
        )

    return Task(
        name=name,
        description=description,
        status=status,
        duration=duration,
        start_time=start,
        id=entity_id,
    )


def _entity_command(kind: _Kind, state: AppState, args: list[str]) -> str:
    sub = args[0].lower() if args else "list"
    rest = args[1:]

    if sub == "list":
        return _format_list(f"{kind.label}s", getattr(state.tasks, f"get_{kind.plural}")())

    if sub == "add":
        entity = _build(kind, _parse_kv(rest), None)
        new_id = kind.call(state, "create", entity)
        return f"{kind.label} created: #{new_id}"

    if sub == "get":
        return format_entity(kind.call(state, "get", _parse_id(rest[0] if rest else None)))

    if sub == "update":
        kv = _parse_kv(rest)
        entity_id = _parse_id(kv.get("id"))
        base = kind.find(state, entity_id)
        entity = _build(kind, kv, base)
        saved_id = kind.call(state, "update", entity)
        if base is None:
            return f"{kind.label} #{entity_id} did not exist; created #{saved_id}"
        return f"{kind.label} updated: #{saved_id}"

    if sub in ("del", "delete", "rm"):
        entity_id = _parse_id(rest[0] if rest else None)
        kind.call(state, "delete", entity_id)
        return f"{kind.label} deleted: #{entity_id}"

    if sub == "clear":
        getattr(state.tasks, f"delete_{kind.plural}")()
        return f"All {kind.label.lower()}s deleted."

    if sub == "subs" and kind is _EPIC:
        epic_id = _parse_id(rest[0] if rest else None)
        return _format_list(f"Subtasks of epic #{epic_id}", state.tasks.get_subtasks_of_epic(epic_id))

    return f"Unknown subcommand {sub!r}. Use /help."


def cmd_task(state: AppState, args: list[str]) -> str:
    return _entity_command(_TASK, state, args)


def cmd_sub(state: AppState, args: list[str]) -> str:
    return _entity_command(_SUBTASK, state, args)


def cmd_epic(state: AppState, args: list[str]) -> str:
    return _entity_command(_EPIC, state, args)


def cmd_history(state: AppState, args: list[str]) -> str:
    return _format_list("History (oldest first)", state.tasks.get_history())


def cmd_prio(state: AppState, args: list[str]) -> str:
    return _format_list("By start time", state.tasks.get_prioritized_tasks())


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    storage = str(settings.tasks_file_path) if getattr(settings, "persist", False) else "memory only"
    return (
        "Status:\n"
        f"  Storage: {storage}\n"
        f"  Tasks: {len(state.tasks.get_tasks())}\n"
        f"  Epics: {len(state.tasks.get_epics())}\n"
        f"  Subtasks: {len(state.tasks.get_subtasks())}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage and entity counts.")
registry.register(
    "task",
    cmd_task,
    help_text="Tasks: add name=.. start=ISO [dur=MIN] [desc=..] | get ID | list | "
    "update id=.. [field=..] | del ID | clear.",
)
registry.register(
    "epic",
    cmd_epic,
    help_text="Epics: add name=.. [desc=..] | get ID | list | update id=.. | del ID | clear | subs ID.",
)
registry.register(
    "sub",
    cmd_sub,
    help_text="Subtasks: add epic=ID name=.. start=ISO [dur=MIN] | get ID | list | update id=.. | del ID | clear.",
    aliases=["subtask"],
)
registry.register("history", cmd_history, help_text="Recently viewed entities.")
registry.register("prio", cmd_prio, help_text="Tasks and subtasks ordered by start time.", aliases=["prioritized"])
