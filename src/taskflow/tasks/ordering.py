# src/taskflow/tasks/ordering.py

"""
Canonical task ordering and due-date classification.

Everything here is a pure function of (tasks, now); nothing derived is stored
on the task records.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from .task_models import Task

DUE_SOON_DISPLAY_WINDOW = timedelta(hours=48)


class DueState(str, Enum):
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    NONE = "none"


def task_sort_key(task: Task) -> tuple[int, int, float, float, int]:
    """
    Sort key for the canonical order:
    priority desc, dated before undated, due date asc, created_at desc, id desc.
    """
    has_due = task.due_date is not None
    due_ts = task.due_date.timestamp() if task.due_date is not None else 0.0
    return (
        -task.priority.rank,
        0 if has_due else 1,
        due_ts,
        -task.created_at.timestamp(),
        -task.id,
    )


def sort_tasks(tasks: Iterable[Task]) -> list[Task]:
    return sorted(tasks, key=task_sort_key)


def is_overdue(task: Task, now: datetime) -> bool:
    return task.due_date is not None and not task.completed and task.due_date < now


def is_due_soon(task: Task, now: datetime, window: timedelta = DUE_SOON_DISPLAY_WINDOW) -> bool:
    if task.due_date is None or task.completed:
        return False
    return now < task.due_date < now + window


def classify(task: Task, now: datetime, window: timedelta = DUE_SOON_DISPLAY_WINDOW) -> DueState:
    if is_overdue(task, now):
        return DueState.OVERDUE
    if is_due_soon(task, now, window):
        return DueState.DUE_SOON
    return DueState.NONE


def format_due_date(due_date: datetime, now: datetime) -> str:
    """Human label for a due date relative to now ("Due tomorrow", "Overdue by 2 days")."""
    diff_days = math.ceil((due_date - now) / timedelta(days=1))

    if diff_days < 0:
        n = abs(diff_days)
        return f"Overdue by {n} day{'' if n == 1 else 's'}"
    if diff_days == 0:
        return "Due today"
    if diff_days == 1:
        return "Due tomorrow"
    if diff_days <= 7:
        return f"Due in {diff_days} days"
    return due_date.strftime("%b %d, %Y")


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    pending: int
    overdue: int


def task_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    items = list(tasks)
    return TaskStats(
        total=len(items),
        pending=sum(1 for t in items if not t.completed),
        overdue=sum(1 for t in items if is_overdue(t, now)),
    )
