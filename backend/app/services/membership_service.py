"""
Membership lifecycle: a (user, project) pair is either NOT_MEMBER or MEMBER.

Adding requires project ownership. Removing is allowed to the owner or to the
member themselves ("leave project"), never to anyone for the owner's own row.
Tasks held by a departing member are handed to the project owner in the same
transaction that deletes the membership.
"""

from __future__ import annotations

import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app import models
from app.core.exceptions import Conflict, StoreFailure, raise_not_found, raise_permission_denied
from app.core.logging import get_logger
from app.schemas import normalize_email
from app.services.access import can_remove_member, is_member, is_owner, require_owner

logger = get_logger(__name__)


def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == normalize_email(email)).first()


def list_members(db: Session, project: models.Project) -> list[models.Membership]:
    return (
        db.query(models.Membership)
        .options(joinedload(models.Membership.user))
        .filter(models.Membership.project_id == project.id)
        .order_by(models.Membership.created_at.asc(), models.Membership.id.asc())
        .all()
    )


def add_member(
    db: Session, project: models.Project, requester: models.User, email: str
) -> models.Membership:
    require_owner(project, requester, "add members")

    user = get_user_by_email(db, email)
    if user is None:
        raise_not_found("User", message=f"No registered user with email '{normalize_email(email)}'")

    if is_owner(project, user.id) or is_member(db, project.id, user.id):
        raise Conflict(f"User '{user.email}' is already a member of this project")

    membership = models.Membership(project_id=project.id, user_id=user.id)
    db.add(membership)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent add of the same user
        db.rollback()
        raise Conflict(f"User '{user.email}' is already a member of this project") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("add member", exc) from exc

    db.refresh(membership)
    logger.info(
        "member_added",
        project_id=project.id,
        user_id=str(user.id),
        added_by=str(requester.id),
    )
    return membership


def _reassign_tasks_to_owner(db: Session, project: models.Project, user_id: uuid.UUID) -> int:
    return (
        db.query(models.Task)
        .filter(models.Task.project_id == project.id, models.Task.assignee_id == user_id)
        .update({models.Task.assignee_id: project.owner_id}, synchronize_session="fetch")
    )


def remove_member(
    db: Session, project: models.Project, requester: models.User, target_user_id: uuid.UUID
) -> bool:
    """
    Remove ``target_user_id`` from the project.

    Returns True when the requester removed themselves (left the project).

    Raises:
        PermissionDenied: requester is neither owner nor the target, or the
            target is the project owner.
        ResourceNotFound: the target has no membership in the project.
        StoreFailure: reassignment or deletion failed; nothing was changed.
    """
    if not can_remove_member(project, requester.id, target_user_id):
        raise_permission_denied(action="remove this member")
    if is_owner(project, target_user_id):
        raise_permission_denied("The project owner cannot be removed from the project")

    membership = (
        db.query(models.Membership)
        .filter(
            models.Membership.project_id == project.id,
            models.Membership.user_id == target_user_id,
        )
        .first()
    )
    if membership is None:
        raise_not_found("Membership", message="User is not a member of this project")

    try:
        reassigned = _reassign_tasks_to_owner(db, project, target_user_id)
        db.delete(membership)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("remove member", exc) from exc

    left_project = requester.id == target_user_id
    logger.info(
        "member_removed",
        project_id=project.id,
        user_id=str(target_user_id),
        removed_by=str(requester.id),
        left_project=left_project,
        tasks_reassigned=reassigned,
    )
    return left_project
