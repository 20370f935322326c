# tests/test_commands.py

from __future__ import annotations

from task_tracker.cli.commands import CommandRegistry, registry
from task_tracker.cli.console import handle_line, run_console_loop
from task_tracker.tasks.task_models import TaskStatus


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def h(state, args):
        called["a"] += 1
        return f"a:{' '.join(args)}"

    reg.register("alpha", h, "alpha", aliases=["al"])

    assert reg.handle(state, "/alpha x y") == "a:x y"
    assert reg.handle(state, '/al "x y"') == "a:x y"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_task_add_get_and_history(state) -> None:
    reply = registry.handle(state, '/task add name="Write report" start=2024-03-01T09:00 dur=30')
    assert reply == "Task created: #1"

    shown = registry.handle(state, "/task get 1") or ""
    assert "Write report" in shown
    assert "09:00 -> 2024-03-01 09:30" in shown

    assert "#1" in (registry.handle(state, "/history") or "")


def test_epic_and_subtask_flow(state) -> None:
    assert registry.handle(state, "/epic add name=Release") == "Epic created: #1"
    assert (
        registry.handle(state, "/sub add epic=1 name=Build start=2024-03-01T09:00 dur=60")
        == "SubTask created: #2"
    )
    assert registry.handle(state, "/sub update id=2 status=done") == "SubTask updated: #2"

    assert state.tasks.get_epic(1).status is TaskStatus.DONE
    assert "Build" in (registry.handle(state, "/epic subs 1") or "")
    assert "#2" in (registry.handle(state, "/prio") or "")

    assert registry.handle(state, "/epic del 1") == "Epic deleted: #1"
    assert state.tasks.get_subtasks() == []


def test_engine_errors_become_messages(state) -> None:
    handle_line(state, "/task add name=A start=2024-03-01T09:00 dur=10")

    clash = handle_line(state, "/task add name=B start=2024-03-01T09:10 dur=10") or ""
    assert clash.startswith("[OverlapError]")
    assert "number=1" in clash

    missing = handle_line(state, "/task get 99") or ""
    assert missing.startswith("[NotFoundError]")

    bad = handle_line(state, "/task add name=C start=tomorrow") or ""
    assert bad.startswith("[ValidationError]")


def test_update_of_missing_id_creates(state) -> None:
    reply = registry.handle(state, "/task update id=50 name=Ghost start=2024-03-01T12:00") or ""
    assert "did not exist" in reply
    assert [t.name for t in state.tasks.get_tasks()] == ["Ghost"]


def test_status_command(state) -> None:
    registry.handle(state, "/epic add name=E")
    out = registry.handle(state, "/status") or ""
    assert "Epics: 1" in out
    assert str(state.settings.tasks_file_path) in out


def test_console_loop_runs_until_exit(state, capsys) -> None:
    lines = iter(["", "hello", "/epic add name=Loop", "/exit", "/epic add name=Never"])
    run_console_loop(state, read_line=lambda _prompt: next(lines))

    out = capsys.readouterr().out
    assert "Commands start with '/'" in out
    assert "Epic created: #1" in out
    assert [e.name for e in state.tasks.get_epics()] == ["Loop"]


def test_console_loop_stops_on_eof(state) -> None:
    def closed(_prompt: str) -> str:
        raise EOFError

    run_console_loop(state, read_line=closed)


def test_start_with_utc_offset_is_a_validation_error(state) -> None:
    handle_line(state, "/task add name=a start=2024-01-01T10:00")

    reply = handle_line(state, "/task add name=b start=2024-01-01T12:00+02:00") or ""

    assert reply.startswith("[ValidationError]")
    assert [t.name for t in state.tasks.get_tasks()] == ["a"]
