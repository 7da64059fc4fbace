from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app import models
from app.core.exceptions import InvalidInput, StoreFailure
from app.core.logging import get_logger
from app.schemas import BOARD_COLUMN_TITLES, BoardColumn, TaskCreate, TaskRead, TaskStatus
from app.services.access import has_access, require_access, require_task_editor

logger = get_logger(__name__)


def _validate_assignee(db: Session, project: models.Project, assignee_id: uuid.UUID) -> None:
    assignee = db.get(models.User, assignee_id)
    if assignee is None or not has_access(db, project, assignee_id):
        raise InvalidInput(
            "Assignee is not a member of this project",
            {"assignee_id": ["Assignee must be a member of the project"]},
        )


def _commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap(operation, exc) from exc


def list_tasks(db: Session, project: models.Project) -> list[models.Task]:
    return (
        db.query(models.Task)
        .options(joinedload(models.Task.assignee))
        .filter(models.Task.project_id == project.id)
        .order_by(models.Task.created_at.desc(), models.Task.id.desc())
        .all()
    )


def create_task(
    db: Session, project: models.Project, creator: models.User, payload: TaskCreate
) -> models.Task:
    require_access(db, project, creator, "create tasks")

    assignee_id = payload.assignee_id or creator.id
    if payload.assignee_id is not None:
        _validate_assignee(db, project, payload.assignee_id)

    task = models.Task(
        title=payload.title,
        description=payload.description,
        status=payload.status,
        project_id=project.id,
        assignee_id=assignee_id,
    )
    db.add(task)
    _commit(db, "create task")
    db.refresh(task)
    logger.info(
        "task_created",
        project_id=project.id,
        task_id=task.id,
        assignee_id=str(assignee_id),
        created_by=str(creator.id),
    )
    return task


def update_task(
    db: Session,
    project: models.Project,
    task: models.Task,
    editor: models.User,
    changes: dict[str, Any],
) -> models.Task:
    """
    Apply a partial update. Permission is decided by the task as it is now,
    before ``changes`` are applied.
    """
    require_task_editor(project, task, editor, "update this task")

    new_assignee = changes.get("assignee_id")
    if new_assignee is not None and new_assignee != task.assignee_id:
        _validate_assignee(db, project, new_assignee)

    for field, value in changes.items():
        setattr(task, field, value)
    # Stamp every accepted update, also when the values did not change
    task.updated_at = datetime.now(timezone.utc)
    _commit(db, "update task")
    db.refresh(task)
    logger.info(
        "task_updated",
        project_id=project.id,
        task_id=task.id,
        fields=sorted(changes),
        updated_by=str(editor.id),
    )
    return task


def move_task(
    db: Session,
    project: models.Project,
    task: models.Task,
    editor: models.User,
    status: TaskStatus,
) -> models.Task:
    """Drag-and-drop on the board: a status-only update to a known column."""
    require_task_editor(project, task, editor, "move this task")

    previous = task.status
    task.status = TaskStatus(status).value
    task.updated_at = datetime.now(timezone.utc)
    _commit(db, "move task")
    db.refresh(task)
    logger.info(
        "task_moved",
        project_id=project.id,
        task_id=task.id,
        from_status=previous,
        to_status=task.status,
    )
    return task


def delete_task(db: Session, project: models.Project, task: models.Task, editor: models.User) -> None:
    require_task_editor(project, task, editor, "delete this task")
    task_id = task.id
    db.delete(task)
    _commit(db, "delete task")
    logger.info("task_deleted", project_id=project.id, task_id=task_id, deleted_by=str(editor.id))


def build_board(tasks: Iterable[models.Task]) -> tuple[list[BoardColumn], list[TaskRead]]:
    """Group tasks into board columns; unknown statuses go to the second list."""
    columns = {status.value: [] for status in TaskStatus}
    other: list[TaskRead] = []
    for task in tasks:
        dto = TaskRead.model_validate(task, from_attributes=True)
        if task.status in columns:
            columns[task.status].append(dto)
        else:
            other.append(dto)

    return (
        [
            BoardColumn(status=status.value, title=BOARD_COLUMN_TITLES[status], tasks=columns[status.value])
            for status in TaskStatus
        ],
        other,
    )
