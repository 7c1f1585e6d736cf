# tests/test_api_server.py

from __future__ import annotations

from datetime import timedelta

from .fakes import FIXED_NOW


def _create(http, **overrides):
    body = {"title": "task", "priority": "medium", "category": "Work", **overrides}
    resp = http.post("/api/tasks", json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def test_health(http) -> None:
    resp = http.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_create_returns_wire_record_with_defaults(http) -> None:
    task = _create(http, title="Pay rent", priority="high", category="Personal")

    assert task["id"] == 1
    assert task["status"] == "todo"
    assert task["dueDate"] is None
    assert task["isRecurring"] is False
    assert task["recurringPattern"] is None
    assert task["completed"] is False
    assert task["createdAt"] == task["updatedAt"] == FIXED_NOW.isoformat()


def test_create_validation_failure_reports_field(http) -> None:
    resp = http.post("/api/tasks", json={"title": "x", "category": "Work"})
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "priority"

    resp = http.post("/api/tasks", data="not json", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "body"


def test_list_is_ordered_and_filtered(http) -> None:
    _create(http, title="low", priority="low")
    _create(http, title="high undated", priority="high")
    _create(
        http,
        title="high dated",
        priority="high",
        status="review",
        dueDate=(FIXED_NOW + timedelta(days=1)).isoformat(),
    )

    titles = [t["title"] for t in http.get("/api/tasks").get_json()]
    assert titles == ["high dated", "high undated", "low"]

    filtered = http.get("/api/tasks?priority=high&status=review&search=").get_json()
    assert [t["title"] for t in filtered] == ["high dated"]

    assert http.get("/api/tasks?search=UNDATED").get_json()[0]["title"] == "high undated"


def test_list_rejects_unknown_filter_value(http) -> None:
    resp = http.get("/api/tasks?status=blocked")
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "status"


def test_get_update_and_not_found(http) -> None:
    task = _create(http)

    assert http.get(f"/api/tasks/{task['id']}").get_json()["title"] == "task"
    assert http.get("/api/tasks/999").status_code == 404

    resp = http.put(f"/api/tasks/{task['id']}", json={"status": "done", "completed": True})
    assert resp.status_code == 200
    updated = resp.get_json()
    assert (updated["status"], updated["completed"], updated["title"]) == ("done", True, "task")

    assert http.put("/api/tasks/999", json={"title": "x"}).status_code == 404
    assert http.put(f"/api/tasks/{task['id']}", json={"priority": "asap"}).status_code == 400

    nulled = http.put(f"/api/tasks/{task['id']}", json={"status": None})
    assert (nulled.status_code, nulled.get_json()["field"]) == (400, "status")
    assert http.get(f"/api/tasks/{task['id']}").get_json()["status"] == "done"


def test_delete_is_idempotent(http) -> None:
    task = _create(http)

    first = http.delete(f"/api/tasks/{task['id']}")
    second = http.delete(f"/api/tasks/{task['id']}")

    assert (first.status_code, first.get_json()) == (200, {"deleted": True})
    assert (second.status_code, second.get_json()) == (200, {"deleted": False})
    assert http.get(f"/api/tasks/{task['id']}").status_code == 404


def test_register_user(http) -> None:
    resp = http.post("/api/users", json={"username": "ada", "password": "pw"})
    assert resp.status_code == 201
    assert resp.get_json() == {"id": 1, "username": "ada"}

    dup = http.post("/api/users", json={"username": "ada", "password": "pw2"})
    assert dup.status_code == 409

    missing = http.post("/api/users", json={"username": "bob"})
    assert missing.status_code == 400
    assert missing.get_json()["field"] == "password"


def test_unknown_route_is_json_404(http) -> None:
    resp = http.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not Found"}
