# src/taskflow/tasks/notifications.py

from __future__ import annotations

"""
Due-date notification scheduler.

A small polling loop that:
- fetches the current task set from an injected TaskSource,
- evaluates every open, dated task against "now" and a per-task cooldown,
- hands at most one alert per task per cooldown window to an injected Notifier.

Delivery (console line, desktop popup, ...) belongs to the notifier, not the scheduler.
Cooldown state lives only in memory and is lost on restart.
"""

import asyncio
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from ..core.ports import Notifier, TaskSource
from .task_models import Task
from .task_store import utc_now

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0
DEFAULT_COOLDOWN = timedelta(minutes=30)
DEFAULT_DUE_SOON_WINDOW = timedelta(hours=2)
TRANSIENT_DISMISS_SECONDS = 5.0


class AlertKind(str, Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    COMPLETED = "task-complete"


@dataclass(slots=True, frozen=True)
class Alert:
    """
    What the scheduler wants to show.

    persistent alerts stay until the user dismisses them;
    transient ones carry auto_dismiss_seconds.
    """

    kind: AlertKind
    task_id: int
    title: str
    body: str
    persistent: bool
    auto_dismiss_seconds: float | None = None

    @property
    def tag(self) -> str:
        return f"task-{self.kind.value}"


def _format_due(dt: datetime) -> str:
    dt = dt.astimezone()
    hour = dt.hour % 12 or 12
    return f"{dt:%b} {dt.day} at {hour}:{dt:%M} {dt:%p}"


def overdue_alert(task: Task) -> Alert:
    assert task.due_date is not None
    return Alert(
        kind=AlertKind.OVERDUE,
        task_id=task.id,
        title="Task Overdue!",
        body=f'"{task.title}" was due {_format_due(task.due_date)}',
        persistent=True,
    )


def due_soon_alert(task: Task, now: datetime) -> Alert:
    assert task.due_date is not None
    hours = math.ceil((task.due_date - now) / timedelta(hours=1))
    return Alert(
        kind=AlertKind.DUE_SOON,
        task_id=task.id,
        title="Task Due Soon!",
        body=f'"{task.title}" is due in {hours} hour{"" if hours == 1 else "s"}',
        persistent=False,
        auto_dismiss_seconds=TRANSIENT_DISMISS_SECONDS,
    )


def completion_alert(task: Task) -> Alert:
    return Alert(
        kind=AlertKind.COMPLETED,
        task_id=task.id,
        title="Task Completed!",
        body=f'"{task.title}" has been marked as complete',
        persistent=False,
        auto_dismiss_seconds=TRANSIENT_DISMISS_SECONDS,
    )


class DueNotificationScheduler:
    """
    Per-task alert state machine, independent of the store.

    Both the clock and the last-notified map are injectable so ticks can be
    replayed deterministically in tests.
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime] | None = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        due_soon_window: timedelta = DEFAULT_DUE_SOON_WINDOW,
        last_notified: dict[int, datetime] | None = None,
    ) -> None:
        self.notifier = notifier
        self._clock = clock or utc_now
        self.cooldown = cooldown
        self.due_soon_window = due_soon_window
        self.last_notified: dict[int, datetime] = {} if last_notified is None else last_notified

    def reset(self) -> None:
        self.last_notified.clear()

    def evaluate(self, tasks: Iterable[Task], now: datetime | None = None) -> list[Alert]:
        """
        Decide which alerts fire at `now` and record them in the cooldown map.

        - completed or undated tasks are skipped
        - a task notified less than `cooldown` ago is skipped
        - overdue (due < now) -> persistent OVERDUE alert
        - else due < now + due_soon_window -> transient DUE_SOON alert
        """
        if now is None:
            now = self._clock()

        alerts: list[Alert] = []
        for task in tasks:
            if task.completed or task.due_date is None:
                continue

            last = self.last_notified.get(task.id)
            if last is not None and now - last < self.cooldown:
                continue

            if task.due_date < now:
                alerts.append(overdue_alert(task))
            elif task.due_date < now + self.due_soon_window:
                alerts.append(due_soon_alert(task, now))
            else:
                continue

            self.last_notified[task.id] = now
        return alerts

    async def check(self, tasks: Iterable[Task], now: datetime | None = None) -> list[Alert]:
        """One tick: evaluate and deliver. Silently does nothing without permission."""
        try:
            permitted = self.notifier.permission_granted()
        except Exception:
            logger.exception("permission_granted failed; skipping tick")
            return []
        if not permitted:
            return []

        alerts = self.evaluate(tasks, now)
        for alert in alerts:
            try:
                await self.notifier.send_alert(alert)
            except Exception:
                logger.exception(
                    "alert delivery failed task_id=%s kind=%s", alert.task_id, alert.kind.value
                )
        if alerts:
            logger.debug("Notification tick fired %d alert(s)", len(alerts))
        return alerts


async def run_notification_scheduler(
        source: TaskSource,
        scheduler: DueNotificationScheduler,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
) -> None:
    """
    Simple polling loop.

    Every interval_seconds:
    - fetch the full task list from `source` (in a worker thread; HTTP sources block)
    - run one scheduler tick over it
    A failed fetch is logged and the tick is skipped.

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            tasks = await asyncio.to_thread(source.list_tasks)
        except Exception:
            logger.exception("list_tasks failed; skipping notification tick")
            tasks = None

        if tasks:
            await scheduler.check(tasks)

        await asyncio.sleep(sleep_s)
