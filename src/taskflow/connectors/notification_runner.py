# src/taskflow/connectors/notification_runner.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.state import AppState
from ..tasks.notifications import run_notification_scheduler

logger = logging.getLogger(__name__)


@dataclass
class NotificationBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal notification stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _run_until_stopped(state: AppState, stop_event: asyncio.Event) -> None:
    assert state.scheduler is not None
    interval = float(getattr(state.settings, "notify_interval_seconds", 60.0))

    loop_task = asyncio.create_task(
        run_notification_scheduler(state.task_source, state.scheduler, interval_seconds=interval)
    )
    try:
        await stop_event.wait()
    finally:
        loop_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await loop_task
    logger.info("Notification scheduler stopped.")


def start_notifications_in_background(state: AppState) -> NotificationBackgroundRunner | None:
    """
    Start the due-date notification loop in a background thread.

    The console REPL blocks on input(), so the async polling loop gets its own
    event loop. Stopping it is the equivalent of clearing the interval timer.
    """
    if state.scheduler is None:
        logger.info("Notifications disabled, not starting scheduler.")
        return None

    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_until_stopped(state, stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.stop()
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="taskflow-notify", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Notification thread did not initialize properly.")
        return None

    logger.info("Notification scheduler started in background.")
    return NotificationBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
