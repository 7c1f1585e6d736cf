# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.notifications import Alert
from ..views.controller import BoardController

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    try:
        if sys.stdout.isatty():
            sys.stdout.write("\033[1A\033[2K\r")
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        else:
            print(line)
    except Exception:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """
    Notifier that prints alerts to the terminal.

    Overdue alerts stay in `pending` until /dismiss-style acknowledgement
    (acknowledge()); transient ones are just printed.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self.pending: dict[int, Alert] = {}
        self._lock = threading.Lock()

    def permission_granted(self) -> bool:
        return self.enabled

    def show(self, alert: Alert) -> None:
        if alert.persistent:
            with self._lock:
                self.pending[alert.task_id] = alert
        marker = "!!" if alert.persistent else "--"
        _print_ts(f"{marker} {alert.title} {alert.body}")

    async def send_alert(self, alert: Alert) -> None:
        self.show(alert)

    def acknowledge(self, task_id: int | None = None) -> int:
        with self._lock:
            if task_id is None:
                n = len(self.pending)
                self.pending.clear()
                return n
            return 1 if self.pending.pop(task_id, None) is not None else 0


def console_toast(title: str, *, variant: str = "default") -> None:
    prefix = "[!]" if variant == "destructive" else "[ok]"
    _print_ts(f"{prefix} {title}")


def run_console_loop(state: AppState, controller: BoardController) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /help for commands, /list to see your tasks. Use /exit to quit.\n")

    lock = getattr(state, "lock", None)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            user_input = "/add " + user_input

        try:
            if lock:
                with lock:
                    response = command_registry.handle(state, controller, user_input, emit=emit)
            else:
                response = command_registry.handle(state, controller, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(f"[{_ts_local()}] {response}\n")

    logger.info("Console connector finished.")
