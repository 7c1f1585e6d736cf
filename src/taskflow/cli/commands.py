# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from datetime import timedelta
from typing import Any, cast

from ..core.state import AppState
from ..tasks.task_store import utc_now
from ..views.board import render_board, render_list
from ..views.controller import BoardController

CommandEmitter = Callable[[str], None]
CommandHandler3 = Callable[[AppState, BoardController, list[str]], str]
CommandHandler4 = Callable[[AppState, BoardController, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler3 | CommandHandler4

logger = logging.getLogger(__name__)

# /add and /edit option keys -> wire field names
OPTION_KEYS: dict[str, str] = {
    "title": "title",
    "priority": "priority",
    "p": "priority",
    "category": "category",
    "cat": "category",
    "desc": "description",
    "description": "description",
    "due": "dueDate",
    "status": "status",
    "recurring": "recurringPattern",
    "completed": "completed",
}

DEFAULT_NEW_TASK = {"priority": "medium", "category": "Work"}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        controller: BoardController,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as exc:
            return f"Could not parse command: {exc}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 4

        if nparams >= 4:
            h4 = cast(CommandHandler4, handler)
            return h4(state, controller, args, emit)

        h3 = cast(CommandHandler3, handler)
        return h3(state, controller, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _display_window(state: AppState) -> timedelta:
    hours = int(getattr(state.settings, "due_soon_display_hours", 48))
    return timedelta(hours=hours)


def _render(state: AppState, controller: BoardController) -> str:
    now = utc_now()
    window = _display_window(state)
    if controller.view == "kanban":
        body = render_board(controller.tasks, now, window=window)
    else:
        body = render_list(controller.tasks, now, window=window)
    stats = controller.stats()
    header = f"{stats.total} tasks, {stats.pending} pending, {stats.overdue} overdue"
    return f"{header}\n{body}"


def parse_options(args: list[str]) -> tuple[list[str], dict[str, Any]]:
    """
    Split "key=value" options from free words.

    recurring=<pattern> also sets isRecurring; recurring=none clears both.
    completed=yes/no is turned into a boolean.
    """
    words: list[str] = []
    fields: dict[str, Any] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        wire = OPTION_KEYS.get(key.lower()) if sep else None
        if wire is None:
            words.append(arg)
            continue
        if wire == "recurringPattern":
            if value.lower() in ("", "none", "no", "off"):
                fields["isRecurring"] = False
                fields["recurringPattern"] = None
            else:
                fields["isRecurring"] = True
                fields["recurringPattern"] = value
        elif wire == "completed":
            fields["completed"] = value.lower() in ("1", "true", "yes", "y", "on")
        else:
            fields[wire] = value
    return words, fields


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0].lstrip("#"))
    except ValueError:
        return None


def cmd_help(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    return registry.build_help()


def cmd_list(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    controller.set_view("list")
    controller.refresh()
    return _render(state, controller)


def cmd_board(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    controller.set_view("kanban")
    controller.refresh()
    return _render(state, controller)


def cmd_add(
    state: AppState,
    controller: BoardController,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /add Pay rent priority=high cat=Personal due=2026-11-01T09:00 recurring=monthly
    """
    words, fields = parse_options(args)
    if words and "title" not in fields:
        fields["title"] = " ".join(words)
    if not fields.get("title"):
        return "Usage: /add <title> [priority=high|medium|low] [cat=...] [due=ISO] [desc=...]"

    payload = {**DEFAULT_NEW_TASK, **fields}
    defaulted = sorted(k for k in DEFAULT_NEW_TASK if k not in fields)
    if emit is not None and defaulted:
        emit(f"(using default {', '.join(defaulted)})")
    result = controller.create_task(payload)
    if not result.ok or result.task is None:
        return f"Task not created ({result.error})."
    return f"Created #{result.task.id}: {result.task.title}"


def cmd_edit(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id> key=value ..."
    words, fields = parse_options(args[1:])
    if words:
        return f"Unrecognized option(s): {' '.join(words)}. Use key=value."
    if not fields:
        return "Nothing to change."
    result = controller.update_task(task_id, fields)
    if not result.ok or result.task is None:
        return f"Task #{task_id} not updated ({result.error})."
    return f"Updated #{task_id}."


def cmd_move(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    task_id = _parse_id(args)
    if task_id is None or len(args) < 2:
        return "Usage: /move <id> todo|in-progress|review|done"
    result = controller.move_task(task_id, args[1])
    if not result.ok or result.task is None:
        return f"Task #{task_id} not moved ({result.error})."
    return f"Task #{task_id} -> {result.task.status.value}"


def cmd_done(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    result = controller.toggle_completed(task_id)
    if not result.ok or result.task is None:
        return f"Task #{task_id} unchanged ({result.error})."
    state_word = "completed" if result.task.completed else "reopened"
    return f"Task #{task_id} {state_word}."


def cmd_delete(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /del <id>"
    result = controller.delete_task(task_id)
    return f"Task #{task_id} deleted." if result.ok else f"Delete failed ({result.error})."


def cmd_search(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    controller.set_filters(search=" ".join(args))
    return _render(state, controller)


def cmd_filter(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    """
    /filter                       -> show active filters
    /filter priority=high status= -> set (empty value clears that filter)
    /filter clear                 -> clear all
    """
    if not args:
        f = controller.filters
        return f"Filters: search={f.search!r} priority={f.priority!r} status={f.status!r}"

    if args[0].lower() == "clear":
        controller.clear_filters()
        return _render(state, controller)

    updates: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or key not in ("search", "priority", "status"):
            return "Usage: /filter [search=...] [priority=...] [status=...] | /filter clear"
        updates[key] = value
    controller.set_filters(**updates)
    if controller.last_error:
        return f"Filter not applied: {controller.last_error}"
    return _render(state, controller)


def cmd_stats(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    controller.refresh()
    s = controller.stats()
    return f"Total: {s.total}\nPending: {s.pending}\nOverdue: {s.overdue}"


def cmd_dismiss(
    state: AppState,
    controller: BoardController,
    args: list[str],
) -> str:
    """
    /dismiss       -> dismiss every pending overdue alert
    /dismiss <id>  -> dismiss the alert for one task
    """
    notifier = getattr(state.scheduler, "notifier", None)
    acknowledge = getattr(notifier, "acknowledge", None)
    if not callable(acknowledge):
        return "Notifications are off; nothing to dismiss."
    n = acknowledge(_parse_id(args))
    return f"Dismissed {n} alert{'' if n == 1 else 's'}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="List view grouped by priority.", aliases=["ls"])
registry.register("board", cmd_board, help_text="Kanban view grouped by status.", aliases=["kanban"])
registry.register("add", cmd_add, help_text="Create: /add <title> priority=.. cat=.. due=..")
registry.register("edit", cmd_edit, help_text="Update fields: /edit <id> key=value ...")
registry.register("move", cmd_move, help_text="Change column: /move <id> <status>.")
registry.register("done", cmd_done, help_text="Toggle completed: /done <id>.")
registry.register("del", cmd_delete, help_text="Delete: /del <id>.", aliases=["rm"])
registry.register("search", cmd_search, help_text="Search title/description/category.")
registry.register("filter", cmd_filter, help_text="Set filters: /filter priority=high | clear.")
registry.register("stats", cmd_stats, help_text="Total / pending / overdue counts.")
registry.register("dismiss", cmd_dismiss, help_text="Dismiss overdue alerts: /dismiss [id].")
