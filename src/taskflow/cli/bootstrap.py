# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- builds the single TaskStore instance (optionally seeded with demo tasks),
- picks the TaskSource the console talks to (local store or remote HTTP API),
- wires the notification scheduler to a notifier.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from ..api.client import TaskApiClient
from ..config import get_settings
from ..core.ports import Notifier, TaskSource
from ..core.state import AppState
from ..tasks.notifications import DueNotificationScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The scheduler is only built when a notifier is given and notifications are enabled.
    """
    if settings is None:
        settings = get_settings()

    store = TaskStore()
    if getattr(settings, "seed_sample_data", False):
        store.seed_sample_data()

    source: TaskSource = store
    api_url = str(getattr(settings, "api_url", "") or "").strip()
    if api_url:
        source = TaskApiClient(api_url, timeout=float(getattr(settings, "http_timeout_seconds", 10.0)))
        logger.info("Using remote task API at %s", api_url)

    scheduler = None
    if notifier is not None and getattr(settings, "notifications_enabled", True):
        scheduler = DueNotificationScheduler(
            notifier,
            cooldown=timedelta(minutes=int(getattr(settings, "notify_cooldown_minutes", 30))),
            due_soon_window=timedelta(hours=int(getattr(settings, "notify_due_soon_hours", 2))),
        )

    return AppState(settings=settings, task_store=store, task_source=source, scheduler=scheduler)
