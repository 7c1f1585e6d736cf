# src/taskflow/views/board.py

"""
View composition: list (by priority) and kanban (by status) groupings,
client-side filters, and plain-text renderings for the console.

Pure derived data: nothing here holds state between calls. Input order is
preserved inside every group, so the store's canonical order carries through.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..tasks.ordering import DUE_SOON_DISPLAY_WINDOW, DueState, classify, format_due_date
from ..tasks.task_models import Task, TaskPriority, TaskStatus
from ..tasks.task_schema import parse_priority, parse_status
from ..tasks.task_store import matches_query

COLUMN_TITLES: dict[TaskStatus, str] = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.REVIEW: "Review",
    TaskStatus.DONE: "Done",
}

SECTION_TITLES: dict[TaskPriority, str] = {
    TaskPriority.HIGH: "High Priority Tasks",
    TaskPriority.MEDIUM: "Medium Priority Tasks",
    TaskPriority.LOW: "Low Priority Tasks",
}


@dataclass(slots=True, frozen=True)
class TaskFilters:
    """Empty strings mean "no filter", matching the query-string semantics."""

    search: str = ""
    priority: str = ""
    status: str = ""

    def as_query(self) -> dict[str, str]:
        return {k: v for k, v in (
            ("search", self.search),
            ("priority", self.priority),
            ("status", self.status),
        ) if v}


@dataclass(slots=True, frozen=True)
class KanbanColumn:
    status: TaskStatus
    title: str
    tasks: list[Task]

    @property
    def count(self) -> int:
        return len(self.tasks)


def apply_filters(tasks: Iterable[Task], filters: TaskFilters) -> list[Task]:
    out = list(tasks)
    if filters.priority:
        priority = parse_priority(filters.priority)
        out = [t for t in out if t.priority == priority]
    if filters.status:
        status = parse_status(filters.status)
        out = [t for t in out if t.status == status]
    if filters.search:
        out = [t for t in out if matches_query(t, filters.search)]
    return out


def group_by_priority(tasks: Iterable[Task]) -> dict[TaskPriority, list[Task]]:
    groups: dict[TaskPriority, list[Task]] = {p: [] for p in TaskPriority}
    for task in tasks:
        groups[task.priority].append(task)
    return groups


def group_by_status(tasks: Iterable[Task]) -> list[KanbanColumn]:
    buckets: dict[TaskStatus, list[Task]] = {s: [] for s in TaskStatus}
    for task in tasks:
        buckets[task.status].append(task)
    return [KanbanColumn(status=s, title=COLUMN_TITLES[s], tasks=buckets[s]) for s in TaskStatus]


# ---- text rendering ----

def render_task_line(
    task: Task,
    now: datetime,
    *,
    window: timedelta = DUE_SOON_DISPLAY_WINDOW,
) -> str:
    check = "x" if task.completed else " "
    parts = [f"[{check}] #{task.id} {task.title}", f"({task.category})"]
    if task.is_recurring and task.recurring_pattern:
        parts.append(f"~{task.recurring_pattern.value}")
    if task.due_date is not None:
        parts.append(f"- {format_due_date(task.due_date, now)}")

    state = classify(task, now, window)
    if state is DueState.OVERDUE:
        parts.append("!OVERDUE")
    elif state is DueState.DUE_SOON:
        parts.append("!due soon")
    return " ".join(parts)


def render_list(
    tasks: Iterable[Task],
    now: datetime,
    *,
    window: timedelta = DUE_SOON_DISPLAY_WINDOW,
) -> str:
    lines: list[str] = []
    for priority, items in group_by_priority(tasks).items():
        lines.append(f"{SECTION_TITLES[priority]} ({len(items)})")
        if not items:
            lines.append(f"  No {priority.value} priority tasks")
        for task in items:
            lines.append("  " + render_task_line(task, now, window=window))
    return "\n".join(lines)


def render_board(
    tasks: Iterable[Task],
    now: datetime,
    *,
    window: timedelta = DUE_SOON_DISPLAY_WINDOW,
) -> str:
    lines: list[str] = []
    for column in group_by_status(tasks):
        lines.append(f"== {column.title} ({column.count}) ==")
        if not column.tasks:
            lines.append(f"  No tasks in {column.title.lower()}")
        for task in column.tasks:
            lines.append("  " + render_task_line(task, now, window=window))
    return "\n".join(lines)
