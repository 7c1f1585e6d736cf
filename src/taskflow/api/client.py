# src/taskflow/api/client.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from ..errors import TaskValidationError, TransportError
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _jsonable(fields: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in fields.items():
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        elif hasattr(value, "value") and isinstance(value.value, str):
            value = value.value
        out[key] = value
    return out


class TaskApiClient:
    """
    HTTP client for the TaskFlow REST API; satisfies the TaskSource port.

    - 404 -> None (get/update), matching the store's not-found contract
    - 400 -> TaskValidationError with the server-reported field
    - network errors and any other unexpected status -> TransportError
    No automatic retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        session: requests.Session | Any | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)
        self._session = session if session is not None else requests.Session()

    def close(self) -> None:
        close = getattr(self._session, "close", None)
        if callable(close):
            close()

    # ---- low-level ----

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/tasks{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = self._url(path)
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        return resp

    @staticmethod
    def _json(resp: Any) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                f"invalid JSON in response (status {resp.status_code})",
                status_code=resp.status_code,
            ) from exc

    def _raise_for(self, resp: Any) -> None:
        if resp.status_code == 400:
            body = self._json(resp) or {}
            raise TaskValidationError(
                str(body.get("field") or "body"),
                str(body.get("error") or "invalid request"),
            )
        if resp.status_code >= 400:
            raise TransportError(
                f"unexpected status {resp.status_code}", status_code=resp.status_code
            )

    # ---- TaskSource ----

    def list_tasks(
        self,
        *,
        search: str | None = None,
        priority: Any | None = None,
        status: Any | None = None,
    ) -> list[Task]:
        params = _jsonable(
            {k: v for k, v in (("search", search), ("priority", priority), ("status", status)) if v}
        )
        resp = self._request("GET", "", params=params)
        self._raise_for(resp)
        return [Task.from_dict(item) for item in self._json(resp)]

    def get_task(self, task_id: int) -> Task | None:
        resp = self._request("GET", f"/{int(task_id)}")
        if resp.status_code == 404:
            return None
        self._raise_for(resp)
        return Task.from_dict(self._json(resp))

    def create_task(self, fields: Mapping[str, Any]) -> Task:
        resp = self._request("POST", "", json=_jsonable(fields))
        self._raise_for(resp)
        return Task.from_dict(self._json(resp))

    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> Task | None:
        resp = self._request("PUT", f"/{int(task_id)}", json=_jsonable(fields))
        if resp.status_code == 404:
            return None
        self._raise_for(resp)
        return Task.from_dict(self._json(resp))

    def delete_task(self, task_id: int) -> bool:
        resp = self._request("DELETE", f"/{int(task_id)}")
        if resp.status_code == 404:
            return False
        self._raise_for(resp)
        return bool((self._json(resp) or {}).get("deleted", False))
