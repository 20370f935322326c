# tests/test_file_backed.py

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from task_tracker.tasks.file_backed import FileBackedTaskManager
from task_tracker.tasks.task_codec import HEADER
from task_tracker.tasks.task_errors import ManagerLoadError, ManagerSaveError, ValidationError
from task_tracker.tasks.task_models import Task, TaskStatus

from .factories import at, make_epic, make_subtask, make_task, same_fields


def test_every_mutation_is_written(file_manager: FileBackedTaskManager) -> None:
    path = file_manager.path
    assert not path.exists()

    t_id = file_manager.create_task(make_task("first", start=0))
    assert f"{t_id},TASK,first" in path.read_text("utf-8")

    file_manager.delete_task(t_id)
    assert "TASK,first" not in path.read_text("utf-8")


def test_views_are_written_to_history_line(file_manager: FileBackedTaskManager) -> None:
    t_id = file_manager.create_task(make_task(start=0))
    file_manager.get_task(t_id)
    assert file_manager.path.read_text("utf-8").rstrip("\n").split("\n")[-1] == str(t_id)


def test_reload_restores_state(file_manager: FileBackedTaskManager) -> None:
    e_id = file_manager.create_epic(make_epic("E"))
    s_id = file_manager.create_subtask(make_subtask(e_id, start=0, dur=20))
    t_id = file_manager.create_task(make_task("T", start=60))
    file_manager.get_task(t_id)
    file_manager.get_epic(e_id)

    reloaded = FileBackedTaskManager.load(file_manager.path)

    assert same_fields(reloaded.store.epics[e_id], file_manager.store.epics[e_id])
    assert same_fields(reloaded.store.subtasks[s_id], file_manager.store.subtasks[s_id])
    assert [t.id for t in reloaded.get_history()] == [t_id, e_id]
    assert reloaded.create_task(make_task(start=500)) == t_id + 1


def test_load_missing_file_starts_empty(tmp_path: Path) -> None:
    manager = FileBackedTaskManager.load(tmp_path / "nope.csv")
    assert manager.get_tasks() == []
    assert manager.store.last_id == 0


def test_load_corrupt_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "tasks.csv"
    path.write_text(",".join(HEADER) + "\n1,TASK,broken\n\n\n", "utf-8")
    with pytest.raises(ManagerLoadError):
        FileBackedTaskManager.load(path)


def test_save_failure_keeps_memory_change(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", "utf-8")
    manager = FileBackedTaskManager(blocker / "tasks.csv")

    with pytest.raises(ManagerSaveError):
        manager.create_task(make_task("kept", start=0))

    assert [t.name for t in manager.get_tasks()] == ["kept"]


def test_validation_failure_does_not_save(file_manager: FileBackedTaskManager) -> None:
    file_manager.create_task(make_task(start=0))
    before = file_manager.path.read_text("utf-8")

    with pytest.raises(ValueError):
        file_manager.create_task(make_task(start=0))

    assert file_manager.path.read_text("utf-8") == before


def test_status_changes_survive_reload(file_manager: FileBackedTaskManager) -> None:
    e_id = file_manager.create_epic(make_epic())
    s_id = file_manager.create_subtask(make_subtask(e_id, start=0))
    done = make_subtask(e_id, start=0)
    done.id = s_id
    done.status = TaskStatus.DONE
    file_manager.update_subtask(done)

    reloaded = FileBackedTaskManager.load(file_manager.path)
    assert reloaded.store.epics[e_id].status is TaskStatus.DONE


def test_rejected_durations_never_reach_the_file(file_manager: FileBackedTaskManager) -> None:
    kept = file_manager.create_task(make_task("kept", start=0, dur=10))
    for duration in (timedelta(minutes=-10), None, timedelta(seconds=90)):
        with pytest.raises(ValidationError):
            file_manager.create_task(Task(name="odd", duration=duration, start_time=at(100)))

    reloaded = FileBackedTaskManager.load(file_manager.path)
    assert [t.id for t in reloaded.get_tasks()] == [kept]


def test_long_and_zero_durations_survive_reload(file_manager: FileBackedTaskManager) -> None:
    e_id = file_manager.create_epic(make_epic())
    s_id = file_manager.create_subtask(make_subtask(e_id, start=0, dur=0))
    t_id = file_manager.create_task(make_task(start=60, dur=3 * 24 * 60 + 7))

    reloaded = FileBackedTaskManager.load(file_manager.path)

    for original, restored in (
        (file_manager.store.tasks[t_id], reloaded.store.tasks[t_id]),
        (file_manager.store.subtasks[s_id], reloaded.store.subtasks[s_id]),
        (file_manager.store.epics[e_id], reloaded.store.epics[e_id]),
    ):
        assert same_fields(restored, original)
