# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlsplit

import requests

from taskflow.tasks.notifications import Alert
from taskflow.tasks.task_models import Task, TaskPriority, TaskStatus

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_task(
    task_id: int,
    *,
    title: str | None = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
    status: TaskStatus = TaskStatus.TODO,
    category: str = "Work",
    description: str | None = None,
    due_date: datetime | None = None,
    created_at: datetime = FIXED_NOW,
    completed: bool = False,
) -> Task:
    return Task(
        id=task_id,
        title=title or f"task {task_id}",
        priority=priority,
        status=status,
        category=category,
        description=description,
        due_date=due_date,
        created_at=created_at,
        updated_at=created_at,
        completed=completed,
    )


@dataclass(slots=True)
class FakeNotifier:
    """
    Fake Notifier used by scheduler tests.
    """

    granted: bool = True
    fail: bool = False
    sent: list[Alert] = field(default_factory=list)

    def permission_granted(self) -> bool:
        return self.granted

    async def send_alert(self, alert: Alert) -> None:
        if self.fail:
            raise RuntimeError("delivery failed")
        self.sent.append(alert)


@dataclass(slots=True)
class FakeToaster:
    toasts: list[tuple[str, str]] = field(default_factory=list)

    def __call__(self, title: str, *, variant: str = "default") -> None:
        self.toasts.append((title, variant))

    @property
    def titles(self) -> list[str]:
        return [t for t, _ in self.toasts]


class FakeResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeHttpSession:
    """
    requests.Session stand-in that routes calls into a Flask test client.

    Set `down = True` to simulate a network failure.
    """

    def __init__(self, flask_client) -> None:
        self.flask_client = flask_client
        self.down = False
        self.calls: list[tuple[str, str]] = []

    def request(self, method: str, url: str, *, timeout=None, params=None, json=None):
        self.calls.append((method, url))
        if self.down:
            raise requests.ConnectionError("connection refused")
        path = urlsplit(url).path
        resp = self.flask_client.open(path, method=method, query_string=params, json=json)
        return FakeResponse(resp.status_code, resp.get_json(silent=True))

    def close(self) -> None:
        return None


class FailingSource:
    """TaskSource whose every call fails like a dropped connection."""

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def list_tasks(self, **_: Any) -> list[Task]:
        raise self.exc

    def get_task(self, task_id: int) -> Task | None:
        raise self.exc

    def create_task(self, fields) -> Task:
        raise self.exc

    def update_task(self, task_id: int, fields) -> Task | None:
        raise self.exc

    def delete_task(self, task_id: int) -> bool:
        raise self.exc
