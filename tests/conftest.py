# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskflow.api.server import create_app
from taskflow.core.state import AppState
from taskflow.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        api_url="",
        http_timeout_seconds=1.0,
        seed_sample_data=False,
        notifications_enabled=True,
        notify_interval_seconds=60.0,
        notify_cooldown_minutes=30,
        notify_due_soon_hours=2,
        due_soon_display_hours=48,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, task_store=store, task_source=store)


@pytest.fixture()
def app(state: AppState):
    flask_app = create_app(state)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture()
def http(app):
    return app.test_client()
