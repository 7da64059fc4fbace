"""
Kanban board state: tasks grouped by status column, with drag-and-drop moves
sent to the server as status-only updates.
"""

from __future__ import annotations

from typing import Any

import httpx

from app.client.api import ApiError
from app.client.state import ProjectTasksStore
from app.core.logging import get_logger
from app.schemas.enums import BOARD_COLUMN_TITLES, TaskStatus

logger = get_logger(__name__)


class UnknownColumn(ValueError):
    pass


class BoardView:
    def __init__(self, tasks_store: ProjectTasksStore):
        self.store = tasks_store
        self.columns: dict[str, list[dict[str, Any]]] = {status.value: [] for status in TaskStatus}
        self.other: list[dict[str, Any]] = []

    @property
    def titles(self) -> dict[str, str]:
        return {status.value: title for status, title in BOARD_COLUMN_TITLES.items()}

    def load(self) -> "BoardView":
        state = self.store.state
        if state.error is not None:
            raise state.error
        self.columns = {status.value: [] for status in TaskStatus}
        self.other = []
        # Server lists newest first; a column shows oldest at the top
        for task in reversed(state.data["items"]):
            self.columns.get(task["status"], self.other).append(task)
        return self

    def find(self, task_id: int) -> tuple[str | None, dict[str, Any]]:
        for status, tasks in self.columns.items():
            for task in tasks:
                if task["id"] == task_id:
                    return status, task
        for task in self.other:
            if task["id"] == task_id:
                return None, task
        raise KeyError(task_id)

    def _place(self, task: dict[str, Any], status: str | None) -> None:
        for tasks in (*self.columns.values(), self.other):
            if task in tasks:
                tasks.remove(task)
        (self.columns[status] if status in self.columns else self.other).append(task)

    def drop(self, task_id: int, target_status: str) -> dict[str, Any]:
        """
        Move a card to ``target_status``.

        Raises UnknownColumn without contacting the server when the target is
        not a board column. When the server rejects the move or cannot be
        reached, the card goes back to its column and the error propagates.
        """
        if target_status not in self.columns:
            raise UnknownColumn(f"'{target_status}' is not a board column")

        source_status, task = self.find(task_id)
        self._place(task, target_status)
        previous = task["status"]
        task["status"] = target_status
        try:
            updated = self.store.move(task_id, target_status)
        except (ApiError, httpx.HTTPError):
            task["status"] = previous
            self._place(task, source_status)
            logger.info("board_move_reverted", task_id=task_id, status=previous)
            raise
        task.update(updated)
        return task
