# src/taskflow/views/controller.py

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Literal

from ..core.ports import TaskSource, Toaster
from ..errors import TaskValidationError, TransportError
from ..tasks.notifications import Alert, completion_alert
from ..tasks.ordering import TaskStats, task_stats
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_schema import parse_priority, parse_status
from ..tasks.task_store import utc_now
from .board import KanbanColumn, TaskFilters, group_by_priority, group_by_status

logger = logging.getLogger(__name__)

ViewMode = Literal["list", "kanban"]


@dataclass(slots=True)
class MutationResult:
    ok: bool
    task: Task | None = None
    error: str | None = None


def _null_toast(title: str, *, variant: str = "default") -> None:
    return None


class BoardController:
    """
    Mutation/fetch glue between a TaskSource and whatever front end renders it.

    - holds filters, view mode and the last fetched task list
    - every successful mutation shows a toast and refetches
    - failures show a "Failed to ..." toast and keep the previous list;
      nothing is retried automatically
    """

    def __init__(
        self,
        source: TaskSource,
        *,
        toast: Toaster | None = None,
        alert_sink: Callable[[Alert], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.source = source
        self.toast: Toaster = toast or _null_toast
        self.alert_sink = alert_sink
        self._clock = clock or utc_now

        self.filters = TaskFilters()
        self.view: ViewMode = "list"
        self.tasks: list[Task] = []
        self.last_error: str | None = None

    # ---- fetch ----

    def refresh(self) -> list[Task]:
        try:
            self.tasks = self.source.list_tasks(**self.filters.as_query())
            self.last_error = None
        except (TransportError, TaskValidationError) as exc:
            logger.info("Fetch failed: %s", exc)
            self.last_error = str(exc)
            self._toast("Failed to fetch tasks", variant="destructive")
        return self.tasks

    def set_filters(
        self,
        *,
        search: str | None = None,
        priority: str | None = None,
        status: str | None = None,
    ) -> list[Task]:
        updates: dict[str, str] = {}
        if search is not None:
            updates["search"] = search
        if priority is not None:
            updates["priority"] = priority
        if status is not None:
            updates["status"] = status
        candidate = replace(self.filters, **updates)
        # Validate before storing: every later refetch reuses these filters.
        try:
            if candidate.priority:
                parse_priority(candidate.priority)
            if candidate.status:
                parse_status(candidate.status)
        except TaskValidationError as exc:
            self.last_error = str(exc)
            self._toast(f"Invalid filter: {exc.field} {exc.message}", variant="destructive")
            return self.tasks
        self.filters = candidate
        return self.refresh()

    def clear_filters(self) -> list[Task]:
        self.filters = TaskFilters()
        return self.refresh()

    def set_view(self, view: ViewMode) -> None:
        if view not in ("list", "kanban"):
            raise ValueError(f"unknown view: {view}")
        self.view = view

    # ---- derived ----

    def stats(self) -> TaskStats:
        return task_stats(self.tasks, self._clock())

    def list_sections(self) -> dict[Any, list[Task]]:
        return group_by_priority(self.tasks)

    def kanban_columns(self) -> list[KanbanColumn]:
        return group_by_status(self.tasks)

    def find(self, task_id: int) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # ---- mutations ----

    def create_task(self, fields: Mapping[str, Any]) -> MutationResult:
        return self._mutate(
            lambda: self.source.create_task(fields),
            success="Task created successfully!",
            failure="Failed to create task",
        )

    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> MutationResult:
        return self._mutate(
            lambda: self._require(task_id, self.source.update_task(task_id, fields)),
            success="Task updated successfully!",
            failure="Failed to update task",
        )

    def delete_task(self, task_id: int) -> MutationResult:
        def run() -> None:
            self.source.delete_task(task_id)

        return self._mutate(
            run,
            success="Task deleted successfully!",
            failure="Failed to delete task",
        )

    def move_task(self, task_id: int, status: TaskStatus | str) -> MutationResult:
        """
        Kanban drop: change the column and keep completed == (status is done).

        Dropping onto the column the task already sits in sends nothing.
        """
        try:
            new_status = parse_status(status)
        except TaskValidationError as exc:
            self._toast(f"Failed to update task status: {exc.message}", variant="destructive")
            return MutationResult(ok=False, error=str(exc))

        current = self.find(task_id)
        if current is not None and current.status == new_status:
            return MutationResult(ok=True, task=current)

        payload = {"status": new_status.value, "completed": new_status is TaskStatus.DONE}
        return self._mutate(
            lambda: self._require(task_id, self.source.update_task(task_id, payload)),
            success=None,
            failure="Failed to update task status",
        )

    def toggle_completed(self, task_id: int) -> MutationResult:
        # Read fresh: the cached list may predate another client's change.
        try:
            current = self.source.get_task(task_id)
        except TransportError as exc:
            self._toast("Failed to update task", variant="destructive")
            return MutationResult(ok=False, error=str(exc))
        if current is None:
            self._toast(f"Task {task_id} not found", variant="destructive")
            return MutationResult(ok=False, error="not found")

        result = self.update_task(task_id, {"completed": not current.completed})
        if result.ok and result.task is not None and result.task.completed:
            self._emit_alert(completion_alert(result.task))
        return result

    # ---- internals ----

    @staticmethod
    def _require(task_id: int, task: Task | None) -> Task:
        if task is None:
            raise LookupError(f"Task {task_id} not found")
        return task

    def _mutate(
        self,
        action: Callable[[], Task | None],
        *,
        success: str | None,
        failure: str,
    ) -> MutationResult:
        try:
            task = action()
        except TaskValidationError as exc:
            self._toast(f"{failure}: {exc.field} {exc.message}", variant="destructive")
            return MutationResult(ok=False, error=str(exc))
        except LookupError as exc:
            self._toast(f"{failure}: not found", variant="destructive")
            return MutationResult(ok=False, error=str(exc))
        except TransportError as exc:
            logger.info("%s: %s", failure, exc)
            self._toast(failure, variant="destructive")
            return MutationResult(ok=False, error=str(exc))

        if success:
            self._toast(success)
        self.refresh()
        return MutationResult(ok=True, task=task)

    def _toast(self, title: str, *, variant: str = "default") -> None:
        try:
            self.toast(title, variant=variant)
        except Exception:
            logger.debug("toast failed", exc_info=True)

    def _emit_alert(self, alert: Alert) -> None:
        if self.alert_sink is None:
            return
        try:
            self.alert_sink(alert)
        except Exception:
            logger.debug("alert sink failed", exc_info=True)
