from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app import models
from app.core.exceptions import StoreFailure
from app.core.logging import get_logger
from app.schemas import (
    MemberRead,
    ProjectCounts,
    ProjectCreate,
    ProjectDetail,
    ProjectListItem,
    ProjectRead,
    TaskRead,
    UserPublic,
)

logger = get_logger(__name__)


def _add_owner_membership(db: Session, project: models.Project) -> models.Membership:
    membership = models.Membership(project_id=project.id, user_id=project.owner_id)
    db.add(membership)
    db.flush()
    return membership


def create_project(db: Session, owner: models.User, payload: ProjectCreate) -> models.Project:
    """
    Create a project owned by ``owner`` together with the owner's membership row.

    Both rows are written in one transaction: if the membership insert fails the
    project insert is rolled back too, so no project exists without a member.
    """
    project = models.Project(
        name=payload.name,
        description=payload.description,
        owner_id=owner.id,
    )
    try:
        db.add(project)
        db.flush()
        _add_owner_membership(db, project)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("create project", exc) from exc

    db.refresh(project)
    logger.info("project_created", project_id=project.id, owner_id=str(owner.id))
    return project


def _accessible_filter(user_id):
    member_of = select(models.Membership.project_id).where(models.Membership.user_id == user_id)
    return or_(models.Project.owner_id == user_id, models.Project.id.in_(member_of))


def count_members_and_tasks(db: Session, project_ids: list[int]) -> dict[int, ProjectCounts]:
    counts = {project_id: ProjectCounts() for project_id in project_ids}
    if not project_ids:
        return counts

    member_rows = (
        db.query(models.Membership.project_id, func.count(models.Membership.id))
        .filter(models.Membership.project_id.in_(project_ids))
        .group_by(models.Membership.project_id)
        .all()
    )
    for project_id, total in member_rows:
        counts[project_id].members = total

    task_rows = (
        db.query(models.Task.project_id, func.count(models.Task.id))
        .filter(models.Task.project_id.in_(project_ids))
        .group_by(models.Task.project_id)
        .all()
    )
    for project_id, total in task_rows:
        counts[project_id].tasks = total
    return counts


def list_accessible_projects(
    db: Session, user: models.User, *, skip: int = 0, limit: int = 20
) -> tuple[int, list[ProjectListItem]]:
    """Projects the user owns or is a member of, newest first."""
    base_query = db.query(models.Project).filter(_accessible_filter(user.id))
    total = base_query.count()

    projects = (
        base_query.options(joinedload(models.Project.owner))
        .order_by(models.Project.created_at.desc(), models.Project.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    counts = count_members_and_tasks(db, [p.id for p in projects])

    items = [
        ProjectListItem(
            **ProjectRead.model_validate(p, from_attributes=True).model_dump(),
            owner=UserPublic.model_validate(p.owner, from_attributes=True),
            counts=counts[p.id],
        )
        for p in projects
    ]
    return total, items


def build_member_read(membership: models.Membership, project: models.Project) -> MemberRead:
    return MemberRead(
        id=membership.id,
        project_id=membership.project_id,
        user=UserPublic.model_validate(membership.user, from_attributes=True),
        is_owner=membership.user_id == project.owner_id,
        created_at=membership.created_at,
    )


def get_project_detail(db: Session, project: models.Project) -> ProjectDetail:
    memberships = (
        db.query(models.Membership)
        .options(joinedload(models.Membership.user))
        .filter(models.Membership.project_id == project.id)
        .order_by(models.Membership.created_at.asc(), models.Membership.id.asc())
        .all()
    )
    tasks = (
        db.query(models.Task)
        .options(joinedload(models.Task.assignee))
        .filter(models.Task.project_id == project.id)
        .order_by(models.Task.created_at.desc(), models.Task.id.desc())
        .all()
    )

    return ProjectDetail(
        **ProjectRead.model_validate(project, from_attributes=True).model_dump(),
        owner=UserPublic.model_validate(project.owner, from_attributes=True),
        members=[build_member_read(m, project) for m in memberships],
        tasks=[TaskRead.model_validate(t, from_attributes=True) for t in tasks],
        counts=ProjectCounts(members=len(memberships), tasks=len(tasks)),
    )


def update_project(db: Session, project: models.Project, changes: dict[str, Any]) -> models.Project:
    for field, value in changes.items():
        setattr(project, field, value)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("update project", exc) from exc
    db.refresh(project)
    logger.info("project_updated", project_id=project.id, fields=sorted(changes))
    return project


def delete_project(db: Session, project: models.Project) -> None:
    """Delete the project; its tasks and memberships go with it."""
    project_id = project.id
    try:
        db.delete(project)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StoreFailure.wrap("delete project", exc) from exc
    logger.info("project_deleted", project_id=project_id)
