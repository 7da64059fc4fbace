"""
HTTP client for the Taskboard API.

Wraps an ``httpx.Client`` so the same code drives a live server or, in
tests, FastAPI's ``TestClient``. Every non-2xx response is raised as
``ApiError`` carrying the server's ``{"error", "details"}`` envelope.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

import httpx

from app.core.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, error: str, details: Optional[dict[str, Any]] = None):
        self.status_code = status_code
        self.error = error
        self.details = details or {}
        super().__init__(f"{status_code}: {error}")

    @property
    def is_unauthenticated(self) -> bool:
        return self.status_code == 401

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class TaskboardClient:
    def __init__(self, http: httpx.Client, token: str | None = None):
        self.http = http
        self.token = token

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        error = body.get("error") if isinstance(body, dict) else None
        details = body.get("details") if isinstance(body, dict) else None
        logger.debug("api_request_failed", method=method, path=path, status_code=response.status_code)
        raise ApiError(response.status_code, error or response.reason_phrase, details)

    # auth

    def register(self, email: str, password: str) -> dict:
        return self._request("POST", "/api/auth/register", json={"email": email, "password": password})

    def login(self, email: str, password: str) -> str:
        body = self._request(
            "POST",
            "/api/auth/token",
            data={"username": email, "password": password},
        )
        self.token = body["access_token"]
        return self.token

    def me(self) -> dict:
        return self._request("GET", "/api/auth/me")

    # projects

    def list_projects(self, skip: int = 0, limit: int = 20) -> dict:
        return self._request("GET", "/api/projects", params={"skip": skip, "limit": limit})

    def create_project(self, name: str, description: str | None = None) -> dict:
        return self._request("POST", "/api/projects", json={"name": name, "description": description})

    def get_project(self, project_id: int) -> dict:
        return self._request("GET", f"/api/projects/{project_id}")

    def update_project(self, project_id: int, **changes) -> dict:
        return self._request("PUT", f"/api/projects/{project_id}", json=changes)

    def delete_project(self, project_id: int) -> dict:
        return self._request("DELETE", f"/api/projects/{project_id}")

    def get_board(self, project_id: int) -> dict:
        return self._request("GET", f"/api/projects/{project_id}/board")

    # members

    def list_members(self, project_id: int) -> dict:
        return self._request("GET", f"/api/projects/{project_id}/members")

    def add_member(self, project_id: int, email: str) -> dict:
        return self._request("POST", f"/api/projects/{project_id}/members", json={"email": email})

    def remove_member(self, project_id: int, user_id: uuid.UUID | str) -> dict:
        return self._request("DELETE", f"/api/projects/{project_id}/members/{user_id}")

    # tasks

    def list_tasks(self, project_id: int) -> dict:
        return self._request("GET", f"/api/projects/{project_id}/tasks")

    def create_task(
        self,
        project_id: int,
        title: str,
        description: str,
        status: str,
        assignee_id: uuid.UUID | str | None = None,
    ) -> dict:
        payload: dict[str, Any] = {"title": title, "description": description, "status": status}
        if assignee_id is not None:
            payload["assignee_id"] = str(assignee_id)
        return self._request("POST", f"/api/projects/{project_id}/tasks", json=payload)

    def get_task(self, project_id: int, task_id: int) -> dict:
        return self._request("GET", f"/api/projects/{project_id}/tasks/{task_id}")

    def update_task(self, project_id: int, task_id: int, **changes) -> dict:
        if changes.get("assignee_id") is not None:
            changes["assignee_id"] = str(changes["assignee_id"])
        return self._request("PUT", f"/api/projects/{project_id}/tasks/{task_id}", json=changes)

    def move_task(self, project_id: int, task_id: int, status: str) -> dict:
        return self._request(
            "PATCH", f"/api/projects/{project_id}/tasks/{task_id}/status", json={"status": status}
        )

    def delete_task(self, project_id: int, task_id: int) -> dict:
        return self._request("DELETE", f"/api/projects/{project_id}/tasks/{task_id}")

    # users

    def search_users(self, q: str) -> dict:
        return self._request("GET", "/api/users/search", params={"q": q})
