from app import models
from app.db import get_db
from app.routers.auth import get_current_user
from app.schemas import (
    BoardResponse,
    MessageResponse,
    PaginatedResponse,
    ProjectCreate,
    ProjectDetail,
    ProjectListItem,
    ProjectRead,
    ProjectUpdate,
)
from app.schemas.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.services import project_service, task_service
from app.services.access import get_project_or_404, require_access, require_owner
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=PaginatedResponse[ProjectListItem])
def list_projects(
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> PaginatedResponse[ProjectListItem]:
    """
    List projects the current user owns or is a member of.

    - **skip**: Number of items to skip (default: 0)
    - **limit**: Number of items to return (default: 20, max: 100)
    """
    total, items = project_service.list_accessible_projects(db, current_user, skip=skip, limit=limit)
    return PaginatedResponse(total=total, skip=skip, limit=limit, items=items)


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> ProjectRead:
    project = project_service.create_project(db, current_user, payload)
    return ProjectRead.model_validate(project, from_attributes=True)


@router.get("/{project_id}", response_model=ProjectDetail)
def get_project_detail(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> ProjectDetail:
    project = get_project_or_404(db, project_id)
    require_access(db, project, current_user, "view this project")
    return project_service.get_project_detail(db, project)


@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> ProjectRead:
    project = get_project_or_404(db, project_id)
    require_owner(project, current_user, "update this project")
    project = project_service.update_project(db, project, payload.model_dump(exclude_unset=True))
    return ProjectRead.model_validate(project, from_attributes=True)


@router.delete("/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> MessageResponse:
    project = get_project_or_404(db, project_id)
    require_owner(project, current_user, "delete this project")
    project_service.delete_project(db, project)
    return MessageResponse(detail="Project deleted")


@router.get("/{project_id}/board", response_model=BoardResponse)
def get_project_board(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> BoardResponse:
    """Tasks grouped into kanban columns in board order."""
    project = get_project_or_404(db, project_id)
    require_access(db, project, current_user, "view this board")
    columns, other = task_service.build_board(task_service.list_tasks(db, project))
    return BoardResponse(
        project=ProjectRead.model_validate(project, from_attributes=True),
        columns=columns,
        other=other,
    )
