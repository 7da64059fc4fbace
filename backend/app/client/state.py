"""
Client-side data hooks: each read is exposed as a loading/error/data triple
and cached by key. Mutations invalidate the keys of the project they touch,
and the next read refetches.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

import httpx

from app.client.api import ApiError, TaskboardClient

SEARCH_MIN_LENGTH = 2

PROJECTS_KEY = ("projects",)


def project_key(project_id: int, *parts: str) -> tuple:
    return ("project", project_id, *parts)


@dataclass
class QueryState:
    data: Any = None
    # ApiError for a server rejection, httpx.HTTPError when the request never completed
    error: Optional[Exception] = None
    loading: bool = False

    @property
    def ok(self) -> bool:
        return not self.loading and self.error is None


class ResourceCache:
    def __init__(self):
        self._entries: dict[Hashable, QueryState] = {}
        self.fetch_count = 0

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def query(self, key: Hashable, fetch: Callable[[], Any], *, force: bool = False) -> QueryState:
        cached = self._entries.get(key)
        if cached is not None and cached.error is None and not force:
            return cached

        state = QueryState(loading=True)
        self._entries[key] = state
        self.fetch_count += 1
        try:
            state.data = fetch()
        except (ApiError, httpx.HTTPError) as exc:
            state.error = exc
        finally:
            state.loading = False
        return state

    def invalidate(self, *keys: Hashable) -> None:
        for key in keys:
            self._entries.pop(key, None)

    def invalidate_project(self, project_id: int) -> None:
        """Drop every entry scoped to one project, plus the project list (counts change)."""
        stale = [
            key
            for key in self._entries
            if isinstance(key, tuple) and key[:2] == ("project", project_id)
        ]
        self.invalidate(PROJECTS_KEY, *stale)


class ProjectsStore:
    def __init__(self, client: TaskboardClient, cache: ResourceCache):
        self.client = client
        self.cache = cache

    @property
    def state(self) -> QueryState:
        return self.cache.query(PROJECTS_KEY, self.client.list_projects)

    def detail(self, project_id: int) -> QueryState:
        return self.cache.query(project_key(project_id), lambda: self.client.get_project(project_id))

    def create(self, name: str, description: str | None = None) -> dict:
        project = self.client.create_project(name, description)
        self.cache.invalidate(PROJECTS_KEY)
        return project

    def update(self, project_id: int, **changes) -> dict:
        project = self.client.update_project(project_id, **changes)
        self.cache.invalidate_project(project_id)
        return project

    def delete(self, project_id: int) -> None:
        self.client.delete_project(project_id)
        self.cache.invalidate_project(project_id)


class ProjectMembersStore:
    def __init__(self, client: TaskboardClient, cache: ResourceCache, project_id: int):
        self.client = client
        self.cache = cache
        self.project_id = project_id

    @property
    def state(self) -> QueryState:
        return self.cache.query(
            project_key(self.project_id, "members"),
            lambda: self.client.list_members(self.project_id),
        )

    def add(self, email: str) -> dict:
        membership = self.client.add_member(self.project_id, email)
        self.cache.invalidate_project(self.project_id)
        return membership

    def remove(self, user_id: uuid.UUID | str) -> dict:
        # Tasks of the removed member change assignee, so task views are stale too
        result = self.client.remove_member(self.project_id, user_id)
        self.cache.invalidate_project(self.project_id)
        return result


class ProjectTasksStore:
    def __init__(self, client: TaskboardClient, cache: ResourceCache, project_id: int):
        self.client = client
        self.cache = cache
        self.project_id = project_id

    @property
    def state(self) -> QueryState:
        return self.cache.query(
            project_key(self.project_id, "tasks"),
            lambda: self.client.list_tasks(self.project_id),
        )

    def create(self, title: str, description: str, status: str, assignee_id=None) -> dict:
        task = self.client.create_task(self.project_id, title, description, status, assignee_id)
        self.cache.invalidate_project(self.project_id)
        return task

    def update(self, task_id: int, **changes) -> dict:
        task = self.client.update_task(self.project_id, task_id, **changes)
        self.cache.invalidate_project(self.project_id)
        return task

    def move(self, task_id: int, status: str) -> dict:
        task = self.client.move_task(self.project_id, task_id, status)
        self.cache.invalidate_project(self.project_id)
        return task

    def delete(self, task_id: int) -> None:
        self.client.delete_task(self.project_id, task_id)
        self.cache.invalidate_project(self.project_id)


class UserSearchStore:
    def __init__(self, client: TaskboardClient, cache: ResourceCache):
        self.client = client
        self.cache = cache

    def search(self, q: str) -> QueryState:
        term = (q or "").strip()
        if len(term) < SEARCH_MIN_LENGTH:
            return QueryState(data={"items": []})
        return self.cache.query(("user-search", term.lower()), lambda: self.client.search_users(term))
