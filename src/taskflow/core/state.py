# src/taskflow/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.notifications import DueNotificationScheduler
from ..tasks.task_store import TaskStore
from .ports import TaskSource


@dataclass
class AppState:
    """
    Everything a front end needs, wired once by the composition root.

    task_store is always the local store (served by the REST app);
    task_source is what the console talks to: the same store, or an
    HTTP client when a remote API URL is configured.
    """

    settings: Any
    task_store: TaskStore
    task_source: TaskSource
    scheduler: DueNotificationScheduler | None = None

    lock: threading.RLock = field(default_factory=threading.RLock)
