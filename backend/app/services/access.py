"""
Who may view, edit or delete which project or task.

Predicates always read fresh rows through the given session; nothing is cached
between requests. Guard helpers turn a failed predicate into the matching
error: ResourceNotFound when the row is absent, PermissionDenied when it
exists but the caller may not act on it.
"""

from __future__ import annotations

import uuid

from sqlalchemy.orm import Session

from app import models
from app.core.exceptions import raise_not_found, raise_permission_denied


def is_owner(project: models.Project, user_id: uuid.UUID) -> bool:
    return project.owner_id == user_id


def is_member(db: Session, project_id: int, user_id: uuid.UUID) -> bool:
    membership = (
        db.query(models.Membership.id)
        .filter(
            models.Membership.project_id == project_id,
            models.Membership.user_id == user_id,
        )
        .first()
    )
    return membership is not None


def has_access(db: Session, project: models.Project, user_id: uuid.UUID) -> bool:
    """Owner, or holder of an explicit membership row."""
    return is_owner(project, user_id) or is_member(db, project.id, user_id)


def can_edit_task(project: models.Project, task: models.Task, user_id: uuid.UUID) -> bool:
    # Checked against the assignee before the update is applied, so an
    # assignee may hand the task to someone else.
    return is_owner(project, user_id) or task.assignee_id == user_id


def can_remove_member(
    project: models.Project, requester_id: uuid.UUID, target_user_id: uuid.UUID
) -> bool:
    return is_owner(project, requester_id) or requester_id == target_user_id


def get_project_or_404(db: Session, project_id: int) -> models.Project:
    project = db.get(models.Project, project_id)
    if project is None:
        raise_not_found("Project", project_id)
    return project


def get_task_or_404(db: Session, project: models.Project, task_id: int) -> models.Task:
    task = db.get(models.Task, task_id)
    if task is None or task.project_id != project.id:
        raise_not_found("Task", task_id, f"Task with id '{task_id}' not found in this project")
    return task


def require_access(db: Session, project: models.Project, user: models.User, action: str) -> None:
    if not has_access(db, project, user.id):
        raise_permission_denied(action=f"{action} (not a member of project '{project.name}')")


def require_owner(project: models.Project, user: models.User, action: str) -> None:
    if not is_owner(project, user.id):
        raise_permission_denied(action=f"{action} (only the project owner can)")


def require_task_editor(
    project: models.Project, task: models.Task, user: models.User, action: str
) -> None:
    if not can_edit_task(project, task, user.id):
        raise_permission_denied(
            action=f"{action} (only the project owner or the task assignee can)"
        )
