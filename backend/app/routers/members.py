import uuid

from app import models
from app.db import get_db
from app.routers.auth import get_current_user
from app.schemas import (
    MemberAddRequest,
    MemberRead,
    MemberRemovalResponse,
    ProjectMembersResponse,
    ProjectRead,
    UserPublic,
)
from app.services import membership_service
from app.services.access import get_project_or_404, require_access
from app.services.project_service import build_member_read
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/projects/{project_id}/members", tags=["members"])


@router.get("", response_model=ProjectMembersResponse)
def list_project_members(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> ProjectMembersResponse:
    project = get_project_or_404(db, project_id)
    require_access(db, project, current_user, "view members")
    memberships = membership_service.list_members(db, project)
    return ProjectMembersResponse(
        project=ProjectRead.model_validate(project, from_attributes=True),
        owner=UserPublic.model_validate(project.owner, from_attributes=True),
        items=[build_member_read(m, project) for m in memberships],
    )


@router.post("", response_model=MemberRead, status_code=status.HTTP_201_CREATED)
def add_project_member(
    project_id: int,
    payload: MemberAddRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> MemberRead:
    project = get_project_or_404(db, project_id)
    membership = membership_service.add_member(db, project, current_user, payload.email)
    return build_member_read(membership, project)


@router.delete("/{user_id}", response_model=MemberRemovalResponse)
def remove_project_member(
    project_id: int,
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> MemberRemovalResponse:
    """Owner removes a member, or a member leaves. Their tasks move to the owner."""
    project = get_project_or_404(db, project_id)
    left_project = membership_service.remove_member(db, project, current_user, user_id)
    return MemberRemovalResponse(
        detail="You left the project" if left_project else "Member removed",
        left_project=left_project,
    )
