# tests/test_priority.py

from __future__ import annotations

import pytest

from task_tracker.tasks.priority import PriorityIndex, overlaps
from task_tracker.tasks.task_errors import ValidationError

from .factories import at, make_task


def _task(task_id: int, start: int, dur: int = 10):
    t = make_task(f"t{task_id}", start=start, dur=dur)
    t.id = task_id
    return t


def test_touching_windows_overlap() -> None:
    assert overlaps(_task(1, 0), _task(2, 10))
    assert overlaps(_task(2, 10), _task(1, 0))


def test_separated_windows_do_not_overlap() -> None:
    assert not overlaps(_task(1, 0), _task(2, 11))


def test_contained_window_overlaps() -> None:
    assert overlaps(_task(1, 0, dur=60), _task(2, 20, dur=5))


def test_prioritized_order_by_start_then_id() -> None:
    index = PriorityIndex()
    index.add(_task(3, 50))
    index.add(_task(1, 100))
    index.add(_task(2, 0))
    index.add(_task(4, 50))

    assert [t.id for t in index.get_prioritized()] == [2, 3, 4, 1]


def test_remove_by_id_after_in_place_mutation() -> None:
    index = PriorityIndex()
    t = _task(1, 0)
    index.add(t)
    t.start_time = at(500)

    index.remove(1)
    assert len(index) == 0
    assert 1 not in index


def test_find_conflict_skips_excluded_id() -> None:
    index = PriorityIndex()
    index.add(_task(1, 0))
    index.add(_task(2, 100))

    moved = _task(1, 5)
    assert index.find_conflict(moved, exclude_id=1) is None

    clash = _task(9, 95)
    conflict = index.find_conflict(clash)
    assert conflict is not None and conflict.id == 2


def test_unscheduled_task_cannot_be_indexed() -> None:
    index = PriorityIndex()
    unscheduled = _task(1, 0)
    unscheduled.start_time = None

    with pytest.raises(ValidationError):
        index.add(unscheduled)
    assert len(index) == 0
