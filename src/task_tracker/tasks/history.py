# src/task_tracker/tasks/history.py

from __future__ import annotations

from .task_models import Task


class _Node:
    __slots__ = ("task", "prev", "next")

    def __init__(self, task: Task, prev: _Node | None = None) -> None:
        self.task = task
        self.prev = prev
        self.next: _Node | None = None


class HistoryTracker:
    """
    Recency-ordered view log without duplicates.

    A doubly-linked list of nodes plus an id -> node map:
    - add() unlinks an existing node for the same id and appends a fresh one
    - remove() unlinks by id
    Both are O(1); get_history() walks head -> tail.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, _Node] = {}
        self._head: _Node | None = None
        self._tail: _Node | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._nodes

    def add(self, task: Task | None) -> None:
        if task is None:
            return
        self._unlink(self._nodes.get(task.id))
        self._link_last(task)

    def replace(self, task: Task) -> None:
        """Point an existing entry at a new instance without changing its position."""
        node = self._nodes.get(task.id)
        if node is not None:
            node.task = task

    def remove(self, task_id: int) -> None:
        self._unlink(self._nodes.get(task_id))

    def clear(self) -> None:
        self._nodes.clear()
        self._head = None
        self._tail = None

    def get_history(self) -> list[Task]:
        out: list[Task] = []
        node = self._head
        while node is not None:
            out.append(node.task)
            node = node.next
        return out

    def ids(self) -> list[int]:
        return [t.id for t in self.get_history()]

    # ---- linked list ----

    def _link_last(self, task: Task) -> None:
        node = _Node(task, prev=self._tail)
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._nodes[task.id] = node

    def _unlink(self, node: _Node | None) -> None:
        if node is None:
            return
        prev, nxt = node.prev, node.next

        if prev is None:
            self._head = nxt
        else:
            prev.next = nxt

        if nxt is None:
            self._tail = prev
        else:
            nxt.prev = prev

        node.prev = node.next = None
        del self._nodes[node.task.id]
