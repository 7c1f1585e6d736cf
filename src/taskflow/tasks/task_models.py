# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskPriority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}


class TaskStatus(StrEnum):
    """
    Workflow column of a task.

    Independent of Task.completed; the kanban move path keeps them in sync
    (completed == status is DONE), plain updates do not.
    """

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"


class RecurringPattern(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    priority: TaskPriority
    category: str
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    due_date: datetime | None = None
    is_recurring: bool = False
    recurring_pattern: RecurringPattern | None = None
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready wire form (camelCase keys, ISO-8601 datetimes)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "status": self.status.value,
            "category": self.category,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "isRecurring": self.is_recurring,
            "recurringPattern": self.recurring_pattern.value if self.recurring_pattern else None,
            "completed": self.completed,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Rebuild a Task from its wire form (used by the HTTP client)."""
        from .task_schema import parse_datetime

        pattern = data.get("recurringPattern")
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            description=data.get("description"),
            priority=TaskPriority(data["priority"]),
            status=TaskStatus(data.get("status") or TaskStatus.TODO),
            category=str(data["category"]),
            due_date=parse_datetime("dueDate", data.get("dueDate")),
            is_recurring=bool(data.get("isRecurring", False)),
            recurring_pattern=RecurringPattern(pattern) if pattern else None,
            completed=bool(data.get("completed", False)),
            created_at=parse_datetime("createdAt", data["createdAt"]),
            updated_at=parse_datetime("updatedAt", data["updatedAt"]),
        )


@dataclass(slots=True, frozen=True)
class User:
    id: int
    username: str
    password_hash: str

    def to_public_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}
