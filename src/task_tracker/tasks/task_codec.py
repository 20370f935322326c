# src/task_tracker/tasks/task_codec.py

"""
Line-oriented text format for the engine state.

    id,type,name,status,description,epic,duration,startTime
    1,TASK,<name>,<status>,<description>,<duration-min>,<start>
    2,EPIC,<name>,<status>,<description>,<duration-min>,<start>
    3,SUBTASK,<name>,<status>,<description>,<epic-id>,<duration-min>,<start>
    <blank line>
    <history ids, comma-joined; empty line if history is empty>

Rows are written with the csv module, so plain values come out exactly as
above and only text containing commas, quotes or newlines gets quoted.
Epic status/window columns are informational: load recomputes them.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .history import HistoryTracker
from .priority import PriorityIndex
from .task_errors import ManagerLoadError, ManagerSaveError
from .task_models import Epic, SubTask, Task, TaskStatus, TaskType
from .task_store import TaskStore

logger = logging.getLogger(__name__)

HEADER = ["id", "type", "name", "status", "description", "epic", "duration", "startTime"]


@dataclass(slots=True)
class LoadedState:
    store: TaskStore = field(default_factory=TaskStore)
    index: PriorityIndex = field(default_factory=PriorityIndex)
    history: HistoryTracker = field(default_factory=HistoryTracker)


# ---- field helpers ----

def _minutes(duration: timedelta | None) -> str:
    if duration is None:
        return ""
    return str(int(duration.total_seconds() // 60))


def _iso(ts: datetime | None) -> str:
    return "" if ts is None else ts.isoformat()


def _parse_minutes(raw: str) -> timedelta:
    minutes = int(raw)
    if minutes < 0:
        raise ValueError(f"negative duration: {raw}")
    return timedelta(minutes=minutes)


def _parse_start(raw: str) -> datetime:
    start = datetime.fromisoformat(raw)
    if start.tzinfo is not None:
        raise ValueError(f"start time has a UTC offset: {raw}")
    return start


# ---- encode ----

def encode_task(task: Task) -> list[str]:
    if task.start_time is None:
        raise ValueError(f"task {task.id} has no start time")
    return [
        str(task.id),
        TaskType.TASK.value,
        task.name,
        task.status.value,
        task.description,
        _minutes(task.duration),
        _iso(task.start_time),
    ]


def encode_epic(epic: Epic) -> list[str]:
    return [
        str(epic.id),
        TaskType.EPIC.value,
        epic.name,
        epic.status.value,
        epic.description,
        _minutes(epic.duration),
        _iso(epic.start_time),
    ]


def encode_subtask(subtask: SubTask) -> list[str]:
    if subtask.start_time is None:
        raise ValueError(f"subtask {subtask.id} has no start time")
    return [
        str(subtask.id),
        TaskType.SUBTASK.value,
        subtask.name,
        subtask.status.value,
        subtask.description,
        str(subtask.epic_id),
        _minutes(subtask.duration),
        _iso(subtask.start_time),
    ]


def encode_history(history: Iterable[Task]) -> list[str]:
    return [str(t.id) for t in history]


def dump_state(store: TaskStore, history: HistoryTracker) -> str:
    """Serialize the store and the view history. Raises ManagerSaveError."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    try:
        writer.writerow(HEADER)
        for task in sorted(store.tasks.values(), key=lambda t: t.id):
            writer.writerow(encode_task(task))
        for epic in sorted(store.epics.values(), key=lambda t: t.id):
            writer.writerow(encode_epic(epic))
        for subtask in sorted(store.subtasks.values(), key=lambda t: t.id):
            writer.writerow(encode_subtask(subtask))
        buf.write("\n")
        writer.writerow(encode_history(history.get_history()))
    except (AttributeError, TypeError, ValueError, csv.Error) as exc:
        raise ManagerSaveError(f"Error while serializing tasks: {exc}") from exc
    return buf.getvalue()


# ---- decode ----

def decode_row(row: list[str]) -> Task:
    """Decode one entity row; raises ValueError/KeyError on bad input."""
    if len(row) < 2:
        raise ValueError(f"too few columns: {len(row)}")

    kind = TaskType(row[1])
    if kind is TaskType.TASK:
        if len(row) != 7:
            raise ValueError(f"TASK row needs 7 columns, got {len(row)}")
        task_id, _, name, status, description, duration, start = row
        return Task(
            name=name,
            description=description,
            status=TaskStatus(status),
            duration=_parse_minutes(duration),
            start_time=_parse_start(start),
            id=int(task_id),
        )

    if kind is TaskType.EPIC:
        if len(row) != 7:
            raise ValueError(f"EPIC row needs 7 columns, got {len(row)}")
        task_id, _, name, status, description, _duration, _start = row
        TaskStatus(status)
        return Epic(name=name, description=description, id=int(task_id))

    if len(row) != 8:
        raise ValueError(f"SUBTASK row needs 8 columns, got {len(row)}")
    task_id, _, name, status, description, epic_id, duration, start = row
    return SubTask(
        name=name,
        description=description,
        status=TaskStatus(status),
        duration=_parse_minutes(duration),
        start_time=_parse_start(start),
        id=int(task_id),
        epic_id=int(epic_id),
    )


def _put(store: TaskStore, entity: Task) -> None:
    if store.find(entity.id) is not None:
        raise ValueError(f"duplicate id {entity.id}")
    if isinstance(entity, Epic):
        store.epics[entity.id] = entity
    elif isinstance(entity, SubTask):
        store.subtasks[entity.id] = entity
    else:
        store.tasks[entity.id] = entity
    store.bump_id(entity.id)


def load_state(text: str) -> LoadedState:
    """
    Rebuild store, priority index and history from dump_state() output.

    The file is trusted: no overlap re-validation. Any malformed row aborts
    the whole load with ManagerLoadError; nothing partial is returned.
    """
    state = LoadedState()
    if not text.strip():
        return state

    try:
        rows = list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        raise ManagerLoadError(f"Error while loading tasks: {exc}") from exc

    if not rows or not rows[0] or rows[0][0] != HEADER[0]:
        raise ManagerLoadError("Error while loading tasks: missing header line")

    line_no = 1
    pos = 1
    while pos < len(rows) and rows[pos]:
        line_no = pos + 1
        try:
            _put(state.store, decode_row(rows[pos]))
        except (ValueError, KeyError, TypeError) as exc:
            raise ManagerLoadError(f"Error while loading tasks: line {line_no}: {exc}") from exc
        pos += 1

    history_row: list[str] = []
    tail = [r for r in rows[pos + 1:] if r]
    if len(tail) > 1:
        raise ManagerLoadError("Error while loading tasks: unexpected data after history line")
    if tail:
        history_row = tail[0]

    store = state.store
    for subtask in sorted(store.subtasks.values(), key=lambda t: t.id):
        epic = store.epics.get(subtask.epic_id)
        if epic is None:
            raise ManagerLoadError(
                f"Error while loading tasks: subtask {subtask.id} refers to missing epic {subtask.epic_id}"
            )
        epic.add_subtask_id(subtask.id)

    for epic in store.epics.values():
        epic.refresh([store.subtasks[i] for i in epic.subtask_ids])

    for task in [*store.tasks.values(), *store.subtasks.values()]:
        state.index.add(task)

    for raw in history_row:
        try:
            task_id = int(raw)
        except ValueError as exc:
            raise ManagerLoadError(f"Error while loading tasks: bad history id {raw!r}") from exc
        entity = store.find(task_id)
        if entity is None:
            logger.warning("History refers to unknown id=%s; skipped", task_id)
            continue
        state.history.add(entity)

    return state
