# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler, view controller and console depend on Protocols instead of
concrete implementations. The in-memory TaskStore and the HTTP TaskApiClient
both satisfy TaskSource, so every front end can run locally or against a
remote server, and tests can swap in fakes.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.notifications import Alert
    from ..tasks.task_models import Task


class TaskSource(Protocol):
    """Create/read/update/delete/query surface shared by the store and the HTTP client."""

    def list_tasks(
            self,
            *,
            search: str | None = None,
            priority: Any | None = None,
            status: Any | None = None,
    ) -> list[Task]: ...

    def get_task(self, task_id: int) -> Task | None: ...
    def create_task(self, fields: Mapping[str, Any]) -> Task: ...
    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> Task | None: ...
    def delete_task(self, task_id: int) -> bool: ...


class Notifier(Protocol):
    """
    Connector-side port: where user-facing alerts go.

    permission_granted() == False makes the scheduler skip the tick silently.
    """

    def permission_granted(self) -> bool: ...
    def send_alert(self, alert: Alert) -> Awaitable[None]: ...


class Toaster(Protocol):
    """Transient feedback for mutations ("Task updated successfully!")."""

    def __call__(self, title: str, *, variant: str = "default") -> None: ...
