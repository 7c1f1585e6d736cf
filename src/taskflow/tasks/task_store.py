# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import DuplicateUsernameError, TaskValidationError
from .ordering import sort_tasks
from .task_models import RecurringPattern, Task, TaskPriority, TaskStatus, User
from .task_schema import parse_priority, parse_status, validate_new_task, validate_task_update

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class TaskStore:
    """
    In-memory task and user store.

    Lifecycle: construct once in the composition root, hand the same instance
    to every handler, discard on shutdown. Nothing is persisted.

    Thread-safety:
    - one re-entrant lock guards id allocation and both maps
    - records are frozen dataclasses, so readers never see a half-applied update
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or utc_now
        self._lock = threading.RLock()
        self._tasks: dict[int, Task] = {}
        self._users: dict[int, User] = {}
        self._next_task_id = 1
        self._next_user_id = 1
        logger.info("TaskStore ready (in-memory)")

    def close(self) -> None:
        """Compatibility hook for shutdown (nothing to release)."""
        return

    def _now(self) -> datetime:
        return self._clock()

    # ---- tasks ----

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create_task(self, fields: Mapping[str, Any]) -> Task:
        values = validate_new_task(fields)

        with self._lock:
            task_id = self._next_task_id
            self._next_task_id += 1
            now = self._now()
            task = Task(
                id=task_id,
                title=values["title"],
                priority=values["priority"],
                category=values["category"],
                description=values.get("description"),
                status=values.get("status") or TaskStatus.TODO,
                due_date=values.get("due_date"),
                is_recurring=bool(values.get("is_recurring", False)),
                recurring_pattern=values.get("recurring_pattern"),
                completed=bool(values.get("completed", False)),
                created_at=now,
                updated_at=now,
            )
            self._tasks[task_id] = task

        logger.debug(
            "Task added id=%s priority=%s status=%s due=%s",
            task.id,
            task.priority.value,
            task.status.value,
            task.due_date,
        )
        return task

    def get_task(self, task_id: int) -> Task | None:
        with self._lock:
            return self._tasks.get(int(task_id))

    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> Task | None:
        """
        Shallow-merge validated fields onto the stored record.

        id/createdAt/updatedAt in the payload are ignored; updated_at is always bumped.
        Returns None if the task does not exist.
        """
        changes = validate_task_update(fields)

        with self._lock:
            existing = self._tasks.get(int(task_id))
            if existing is None:
                return None
            # Clock may run behind created_at; keep updated_at >= created_at.
            updated_at = max(self._now(), existing.created_at)
            updated = replace(existing, **changes, updated_at=updated_at)
            self._tasks[updated.id] = updated

        logger.debug("Task updated id=%s fields=%s", updated.id, sorted(changes))
        return updated

    def delete_task(self, task_id: int) -> bool:
        with self._lock:
            removed = self._tasks.pop(int(task_id), None)
        if removed is not None:
            logger.debug("Task deleted id=%s", removed.id)
        return removed is not None

    def list_tasks(
        self,
        *,
        search: str | None = None,
        priority: TaskPriority | str | None = None,
        status: TaskStatus | str | None = None,
    ) -> list[Task]:
        """All tasks in canonical order, narrowed by any non-empty filter (AND)."""
        with self._lock:
            tasks = sort_tasks(self._tasks.values())

        if priority:
            wanted_priority = parse_priority(priority)
            tasks = [t for t in tasks if t.priority == wanted_priority]
        if status:
            wanted_status = parse_status(status)
            tasks = [t for t in tasks if t.status == wanted_status]
        if search:
            tasks = [t for t in tasks if matches_query(t, search)]
        return tasks

    def list_by_status(self, status: TaskStatus | str) -> list[Task]:
        return self.list_tasks(status=parse_status(status))

    def list_by_priority(self, priority: TaskPriority | str) -> list[Task]:
        return self.list_tasks(priority=parse_priority(priority))

    def search(self, query: str) -> list[Task]:
        if not query:
            return self.list_tasks()
        return self.list_tasks(search=query)

    # ---- users ----

    def create_user(self, username: str, password: str) -> User:
        name = (username or "").strip()
        if not name:
            raise TaskValidationError("username", "is required")
        if not password:
            raise TaskValidationError("password", "is required")

        password_hash = generate_password_hash(password)
        with self._lock:
            if any(u.username == name for u in self._users.values()):
                raise DuplicateUsernameError(name)
            user = User(id=self._next_user_id, username=name, password_hash=password_hash)
            self._next_user_id += 1
            self._users[user.id] = user

        logger.info("User created id=%s username=%s", user.id, user.username)
        return user

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            return self._users.get(int(user_id))

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user
        return None

    def verify_user(self, username: str, password: str) -> User | None:
        user = self.get_user_by_username(username)
        if user is None or not check_password_hash(user.password_hash, password):
            return None
        return user

    # ---- demo data ----

    def seed_sample_data(self, now: datetime | None = None) -> list[Task]:
        """Load the demo board shown on a fresh install."""
        now = now or self._now()
        tomorrow = now + timedelta(days=1)
        next_week = now + timedelta(days=7)

        samples: list[dict[str, Any]] = [
            {
                "title": "Complete project proposal",
                "description": (
                    "Write and review the quarterly project proposal "
                    "for the new client engagement"
                ),
                "priority": TaskPriority.HIGH,
                "status": TaskStatus.TODO,
                "category": "Work",
                "dueDate": tomorrow,
            },
            {
                "title": "Team standup meeting",
                "description": (
                    "Daily standup with the development team to discuss progress and blockers"
                ),
                "priority": TaskPriority.MEDIUM,
                "status": TaskStatus.IN_PROGRESS,
                "category": "Work",
                "dueDate": now,
                "isRecurring": True,
                "recurringPattern": RecurringPattern.DAILY,
            },
            {
                "title": "Grocery shopping",
                "description": (
                    "Buy groceries for the week including vegetables, fruits, and household items"
                ),
                "priority": TaskPriority.LOW,
                "status": TaskStatus.TODO,
                "category": "Personal",
                "dueDate": next_week,
                "isRecurring": True,
                "recurringPattern": RecurringPattern.WEEKLY,
            },
            {
                "title": "Review code changes",
                "description": "Review pull requests from team members and provide feedback",
                "priority": TaskPriority.HIGH,
                "status": TaskStatus.REVIEW,
                "category": "Work",
                "dueDate": now,
            },
            {
                "title": "Exercise routine",
                "description": "30-minute workout session with cardio and strength training",
                "priority": TaskPriority.MEDIUM,
                "status": TaskStatus.DONE,
                "category": "Health",
                "isRecurring": True,
                "recurringPattern": RecurringPattern.DAILY,
                "completed": True,
            },
        ]

        created = [self.create_task(s) for s in samples]
        logger.info("Seeded %d sample tasks", len(created))
        return created


def matches_query(task: Task, query: str) -> bool:
    """Case-insensitive substring match on title, description or category."""
    q = query.lower()
    return (
        q in task.title.lower()
        or (task.description is not None and q in task.description.lower())
        or q in task.category.lower()
    )
