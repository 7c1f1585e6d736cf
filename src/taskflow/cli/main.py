# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts one front end:
- `taskflow console` (default): REPL in the main thread, notifications in a background thread,
- `taskflow serve`: the Flask REST API over the in-memory store.
"""

from __future__ import annotations

import argparse
import logging
import signal

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, console_toast, run_console_loop
from ..connectors.notification_runner import start_notifications_in_background
from ..logging_setup import setup_logging
from ..views.controller import BoardController

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    for obj in (getattr(state, "task_source", None), getattr(state, "task_store", None)):
        try:
            if obj is not None and hasattr(obj, "close"):
                obj.close()
        except Exception:
            logger.debug("close failed for %r", obj, exc_info=True)


def _run_console(settings) -> None:
    notifier = ConsoleNotifier(enabled=settings.notifications_enabled)
    state = create_initial_state(settings=settings, notifier=notifier)
    controller = BoardController(state.task_source, toast=console_toast, alert_sink=notifier.show)

    runner = start_notifications_in_background(state)
    try:
        run_console_loop(state, controller)
    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=5.0)
        _shutdown(state)


def _run_server(settings) -> None:
    from ..api.server import create_app

    state = create_initial_state(settings=settings)
    app = create_app(state)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    logger.info("Serving TaskFlow API on http://%s:%s", settings.host, settings.port)
    try:
        app.run(host=settings.host, port=settings.port, debug=settings.debug, use_reloader=False)
    except KeyboardInterrupt:
        pass
    finally:
        _shutdown(state)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="taskflow", description="Priority todo manager.")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=("console", "serve"),
        default="console",
        help="console REPL (default) or REST API server",
    )
    args = parser.parse_args(argv)

    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=getattr(settings, "log_level", "INFO"),
    )

    logger.info("Starting %s (%s), full log at %s", settings.app_name, args.mode, log_file)

    if args.mode == "serve":
        _run_server(settings)
    else:
        _run_console(settings)

    logger.info("Bye.")


if __name__ == "__main__":
    main()
