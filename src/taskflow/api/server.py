# src/taskflow/api/server.py

"""
REST surface over the in-memory TaskStore.

create_app() is the Flask application factory; the store comes from the
AppState built by the CLI bootstrap (or a test fixture), never from a
module-level global.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from ..errors import DuplicateUsernameError, TaskValidationError
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)
users_bp = Blueprint("users", __name__)


def _store() -> TaskStore:
    return current_app.extensions["taskflow.store"]


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise TaskValidationError("body", "expected a JSON object")
    return body


@tasks_bp.errorhandler(TaskValidationError)
@users_bp.errorhandler(TaskValidationError)
def _validation_failed(exc: TaskValidationError):
    return jsonify(error=exc.message, field=exc.field), 400


@tasks_bp.get("")
def list_tasks():
    tasks = _store().list_tasks(
        search=request.args.get("search") or None,
        priority=request.args.get("priority") or None,
        status=request.args.get("status") or None,
    )
    return jsonify([t.to_dict() for t in tasks]), 200


@tasks_bp.get("/<int:task_id>")
def get_task(task_id: int):
    task = _store().get_task(task_id)
    if task is None:
        return jsonify(error="Task not found"), 404
    return jsonify(task.to_dict()), 200


@tasks_bp.post("")
def create_task():
    task = _store().create_task(_json_body())
    logger.info("Created task id=%s title=%r", task.id, task.title)
    return jsonify(task.to_dict()), 201


@tasks_bp.put("/<int:task_id>")
def update_task(task_id: int):
    task = _store().update_task(task_id, _json_body())
    if task is None:
        return jsonify(error="Task not found"), 404
    return jsonify(task.to_dict()), 200


@tasks_bp.delete("/<int:task_id>")
def delete_task(task_id: int):
    # Idempotent: a missing id is a successful no-op, reported as deleted=false.
    deleted = _store().delete_task(task_id)
    return jsonify(deleted=deleted), 200


@users_bp.post("")
def register_user():
    body = _json_body()
    try:
        user = _store().create_user(str(body.get("username") or ""), str(body.get("password") or ""))
    except DuplicateUsernameError as exc:
        return jsonify(error="Username already taken", field="username", username=exc.username), 409
    return jsonify(user.to_public_dict()), 201


def create_app(state=None) -> Flask:
    """
    Build the Flask app around `state.task_store`.

    If state is None, a fresh AppState is created from settings.
    """
    if state is None:
        from ..cli.bootstrap import create_initial_state

        state = create_initial_state()

    app = Flask(__name__)
    app.json.sort_keys = False  # type: ignore[attr-defined]
    app.extensions["taskflow.store"] = state.task_store
    app.extensions["taskflow.state"] = state

    CORS(app, resources={r"/api/*": {"origins": "*"}})

    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")
    app.register_blueprint(users_bp, url_prefix="/api/users")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", service="TaskFlow API"), 200

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error="Not Found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(error="Method Not Allowed"), 405

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(error="Internal Server Error"), 500

    return app
