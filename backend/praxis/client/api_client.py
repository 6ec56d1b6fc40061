"""Synchronous HTTP client for the Praxis API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx

from praxis.core.middleware import CLIENT_SESSION_HEADER

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 10


class PraxisClientError(Exception):
    """A request that failed in transport or came back with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PraxisClient:
    """Calls the API on behalf of one user and one client session.

    ``http`` is any ``httpx.Client``; tests pass FastAPI's ``TestClient``.
    """

    def __init__(
        self,
        user_id: UUID,
        *,
        http: httpx.Client | None = None,
        base_url: str = "http://localhost:8000",
        client_session: str | None = None,
    ) -> None:
        self.user_id = user_id
        self.http = http or httpx.Client(base_url=base_url, timeout=_TIMEOUT_SECONDS)
        self.headers = {CLIENT_SESSION_HEADER: client_session} if client_session else {}

    def get_current_plan(self) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/plans/current", params=self._user_params())

    def get_tomorrow_plan(self) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/plans/tomorrow", params=self._user_params())

    def create_plan(self, tasks: List[str], plan_date: str | None = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"user_id": str(self.user_id), "tasks": tasks}
        if plan_date:
            body["plan_date"] = plan_date
        return self._request("POST", "/plans", json=body)

    def set_task_completion(self, task_id: UUID, completed: bool) -> Dict[str, Any]:
        return self._request("PATCH", f"/tasks/{task_id}", json=self._body(completed=completed))

    def update_task_time(self, task_id: UUID, actual_minutes: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/tasks/{task_id}/time", json=self._body(actual_minutes=actual_minutes))

    def remove_task(self, task_id: UUID) -> None:
        self._request("DELETE", f"/tasks/{task_id}", params=self._user_params())

    def update_reflection(self, plan_id: UUID, reflection: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/plans/{plan_id}/reflection", json=self._body(reflection=reflection))

    def update_intention(self, plan_id: UUID, intention: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/plans/{plan_id}/intention", json=self._body(intention=intention))

    def update_energy_mood(self, plan_id: UUID, energy: int, mood: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/plans/{plan_id}/energy-mood", json=self._body(energy=energy, mood=mood))

    def update_check_in(self, plan_id: UUID, mood: int, energy: int, focus: int) -> Dict[str, Any]:
        return self._request(
            "PATCH",
            f"/plans/{plan_id}/check-in",
            json=self._body(mood=mood, energy=energy, focus=focus),
        )

    def _user_params(self) -> Dict[str, str]:
        return {"user_id": str(self.user_id)}

    def _body(self, **fields: Any) -> Dict[str, Any]:
        return {"user_id": str(self.user_id), **fields}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = self.http.request(method, path, headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise PraxisClientError(str(exc)) from exc

        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            raise PraxisClientError(str(detail), status_code=resp.status_code)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()
