# src/taskflow/tasks/task_schema.py

"""
Boundary validation for task payloads.

Payloads arrive as camelCase wire dicts (REST, console) and are turned into
snake_case keyword dicts that the store merges onto Task records. Anything
invalid raises TaskValidationError naming the offending field, so nothing
malformed reaches the store.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from ..errors import TaskValidationError
from .task_models import RecurringPattern, TaskPriority, TaskStatus

# wire key -> Task attribute
FIELD_MAP: dict[str, str] = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "status": "status",
    "category": "category",
    "dueDate": "due_date",
    "isRecurring": "is_recurring",
    "recurringPattern": "recurring_pattern",
    "completed": "completed",
}

# Store-owned keys: silently dropped from create/update payloads.
READ_ONLY_FIELDS = frozenset({"id", "createdAt", "updatedAt"})

REQUIRED_FIELDS = ("title", "priority", "category")


def parse_datetime(field: str, raw: Any) -> datetime | None:
    """Accept datetime or ISO-8601 text; naive values are taken as UTC."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            raise TaskValidationError(field, f"not an ISO-8601 datetime: {raw!r}") from None
    else:
        raise TaskValidationError(field, "expected an ISO-8601 datetime string")

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def _parse_enum(field: str, raw: Any, enum_cls: type[StrEnum]) -> Any:
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        raise TaskValidationError(field, f"expected one of {_choices(enum_cls)}")
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        raise TaskValidationError(
            field, f"{raw!r} is not one of {_choices(enum_cls)}"
        ) from None


def _choices(enum_cls: type[StrEnum]) -> str:
    return ", ".join(m.value for m in enum_cls)


def _parse_text(field: str, raw: Any, *, required: bool) -> str | None:
    if raw is None:
        if required:
            raise TaskValidationError(field, "is required")
        return None
    if not isinstance(raw, str):
        raise TaskValidationError(field, "expected text")
    text = raw.strip()
    if required and not text:
        raise TaskValidationError(field, "must not be empty")
    return text if text else None


def _parse_bool(field: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    raise TaskValidationError(field, "expected true or false")


def parse_priority(raw: Any) -> TaskPriority:
    return _parse_enum("priority", raw, TaskPriority)


def parse_status(raw: Any) -> TaskStatus:
    return _parse_enum("status", raw, TaskStatus)


def _parse_field(key: str, raw: Any, *, creating: bool) -> Any:
    if key == "title":
        return _parse_text(key, raw, required=True)
    if key == "category":
        return _parse_text(key, raw, required=True)
    if key == "description":
        return _parse_text(key, raw, required=False)
    if key == "priority":
        return parse_priority(raw)
    if key == "status":
        if raw is None:
            if not creating:
                raise TaskValidationError(key, "must not be null")
            return TaskStatus.TODO
        return parse_status(raw)
    if key == "dueDate":
        return parse_datetime(key, raw)
    if key == "recurringPattern":
        if raw is None or raw == "":
            return None
        return _parse_enum(key, raw, RecurringPattern)
    if key in ("isRecurring", "completed"):
        if raw is None:
            if not creating:
                raise TaskValidationError(key, "must not be null")
            return False
        return _parse_bool(key, raw)
    raise TaskValidationError(key, "unknown field")


def _normalize_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Accept both wire (camelCase) and attribute (snake_case) keys."""
    reverse = {attr: wire for wire, attr in FIELD_MAP.items()}
    out: dict[str, Any] = {}
    for key, value in payload.items():
        wire = reverse.get(key, key)
        if wire in READ_ONLY_FIELDS or key in ("created_at", "updated_at"):
            continue
        out[wire] = value
    return out


def validate_new_task(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate a create payload and return Task keyword arguments.

    Omitted optional fields are not filled here; the store applies defaults.
    """
    if not isinstance(payload, Mapping):
        raise TaskValidationError("body", "expected a JSON object")

    data = _normalize_keys(payload)
    for key in REQUIRED_FIELDS:
        if key not in data:
            raise TaskValidationError(key, "is required")

    return {FIELD_MAP.get(k, k): _parse_field(k, v, creating=True) for k, v in data.items()}


def validate_task_update(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Validate a partial update; only supplied keys appear in the result.

    Create-time defaults do not apply: null for status, isRecurring or
    completed is rejected rather than reset.
    """
    if not isinstance(payload, Mapping):
        raise TaskValidationError("body", "expected a JSON object")

    data = _normalize_keys(payload)
    return {FIELD_MAP.get(k, k): _parse_field(k, v, creating=False) for k, v in data.items()}
