# tests/test_commands.py

from __future__ import annotations

from taskflow.cli.commands import CommandRegistry, parse_options, registry
from taskflow.views.controller import BoardController


def test_command_registry_routes_3_and_4_params(state) -> None:
    reg = CommandRegistry()
    controller = BoardController(state.task_source)
    called = {"h3": 0, "h4": 0}
    notes: list[str] = []

    def h3(state, controller, args):
        called["h3"] += 1
        return "h3"

    def h4(state, controller, args, emit):
        called["h4"] += 1
        if emit is not None:
            emit("note")
        return "h4"

    reg.register("a", h3, "a")
    reg.register("b", h4, "b")

    assert reg.handle(state, controller, "/a x") == "h3"
    assert reg.handle(state, controller, "/b y", emit=notes.append) == "h4"
    assert called == {"h3": 1, "h4": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    controller = BoardController(state.task_source)
    assert reg.handle(state, controller, "hello") is None
    assert "Unknown command" in (reg.handle(state, controller, "/nope") or "")
    assert "Could not parse" in (reg.handle(state, controller, '/add "unbalanced') or "")


def test_parse_options_splits_words_and_fields() -> None:
    words, fields = parse_options(["Pay", "rent", "p=high", "cat=Personal", "recurring=monthly"])
    assert words == ["Pay", "rent"]
    assert fields == {
        "priority": "high",
        "category": "Personal",
        "isRecurring": True,
        "recurringPattern": "monthly",
    }
    assert parse_options(["recurring=none"])[1] == {"isRecurring": False, "recurringPattern": None}


def test_add_list_move_done_delete_flow(state) -> None:
    controller = BoardController(state.task_source)
    notes: list[str] = []

    reply = registry.handle(
        state, controller, '/add "Pay rent" priority=high cat=Personal', emit=notes.append
    )
    assert reply == "Created #1: Pay rent"
    assert notes == []

    registry.handle(state, controller, "/add Water plants", emit=notes.append)
    assert notes == ["(using default category, priority)"]

    listing = registry.handle(state, controller, "/list") or ""
    assert listing.index("Pay rent") < listing.index("Water plants")
    assert listing.splitlines()[0] == "2 tasks, 2 pending, 0 overdue"

    assert registry.handle(state, controller, "/move 1 review") == "Task #1 -> review"
    assert "== Review (1) ==" in (registry.handle(state, controller, "/board") or "")

    assert registry.handle(state, controller, "/done 2") == "Task #2 completed."
    assert state.task_store.get_task(2).completed is True

    assert registry.handle(state, controller, "/del 2") == "Task #2 deleted."
    assert state.task_store.get_task(2) is None


def test_edit_and_filter(state) -> None:
    controller = BoardController(state.task_source)
    registry.handle(state, controller, "/add Read book cat=Learning priority=low")

    assert registry.handle(state, controller, "/edit 1 priority=high desc=chapter-3") == "Updated #1."
    task = state.task_store.get_task(1)
    assert task.priority.value == "high"
    assert task.description == "chapter-3"

    assert "not updated" in (registry.handle(state, controller, "/edit 1 priority=asap") or "")
    assert "Filter not applied" in (registry.handle(state, controller, "/filter status=blocked") or "")

    shown = registry.handle(state, controller, "/filter priority=high status=") or ""
    assert "Read book" in shown
    assert controller.filters.priority == "high"


def test_dismiss_without_notifier(state) -> None:
    controller = BoardController(state.task_source)
    assert "nothing to dismiss" in (registry.handle(state, controller, "/dismiss") or "")
