# tests/test_console_connector.py

from __future__ import annotations

from taskflow.api.client import TaskApiClient
from taskflow.cli.bootstrap import create_initial_state
from taskflow.connectors.console_connector import ConsoleNotifier, run_console_loop
from taskflow.tasks.notifications import completion_alert, overdue_alert
from taskflow.views.controller import BoardController

from .fakes import FIXED_NOW, make_task


def test_notifier_keeps_overdue_until_acknowledged(capsys) -> None:
    notifier = ConsoleNotifier()
    overdue = make_task(1, title="Taxes", due_date=FIXED_NOW)
    other = make_task(2, title="Rent", due_date=FIXED_NOW)

    notifier.show(overdue_alert(overdue))
    notifier.show(overdue_alert(other))
    notifier.show(completion_alert(make_task(3, completed=True)))

    out = capsys.readouterr().out
    assert "!! Task Overdue" in out
    assert set(notifier.pending) == {1, 2}

    assert notifier.acknowledge(1) == 1
    assert notifier.acknowledge(1) == 0
    assert notifier.acknowledge() == 1
    assert notifier.pending == {}


def test_disabled_notifier_denies_permission() -> None:
    assert ConsoleNotifier(enabled=False).permission_granted() is False


def test_bootstrap_local_store_with_seed(settings) -> None:
    settings.seed_sample_data = True
    state = create_initial_state(settings=settings, notifier=ConsoleNotifier())

    assert state.task_source is state.task_store
    assert state.task_store.count_tasks() == 5
    assert state.scheduler is not None


def test_bootstrap_remote_source_without_notifier(settings) -> None:
    settings.api_url = "http://localhost:5000"
    state = create_initial_state(settings=settings)

    assert isinstance(state.task_source, TaskApiClient)
    assert state.scheduler is None


def test_console_loop_adds_free_text_and_exits(state, monkeypatch, capsys) -> None:
    lines = iter(["Water plants", "/list", "", "/quit", "/list"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    run_console_loop(state, BoardController(state.task_source))

    out = capsys.readouterr().out
    assert "Created #1: Water plants" in out
    assert "Medium Priority Tasks (1)" in out
    assert state.task_store.count_tasks() == 1
