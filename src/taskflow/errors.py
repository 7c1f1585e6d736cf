# src/taskflow/errors.py

from __future__ import annotations


class TaskValidationError(ValueError):
    """A payload was rejected before reaching the store; `field` names the offender."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class DuplicateUsernameError(ValueError):
    def __init__(self, username: str) -> None:
        super().__init__(f"username already taken: {username}")
        self.username = username


class TransportError(RuntimeError):
    """
    Client-side failure talking to the task API (network error or unexpected status).

    Never retried automatically; the user re-invokes the action.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
