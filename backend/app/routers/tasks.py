from app import models
from app.db import get_db
from app.routers.auth import get_current_user
from app.schemas import (
    MessageResponse,
    ProjectRead,
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskStatusUpdate,
    TaskUpdate,
)
from app.services import task_service
from app.services.access import get_project_or_404, get_task_or_404, require_access
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/projects/{project_id}/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_project_tasks(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> TaskListResponse:
    project = get_project_or_404(db, project_id)
    require_access(db, project, current_user, "view tasks")
    tasks = task_service.list_tasks(db, project)
    return TaskListResponse(
        project=ProjectRead.model_validate(project, from_attributes=True),
        items=[TaskRead.model_validate(t, from_attributes=True) for t in tasks],
        total=len(tasks),
    )


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_project_task(
    project_id: int,
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> TaskRead:
    project = get_project_or_404(db, project_id)
    task = task_service.create_task(db, project, current_user, payload)
    return TaskRead.model_validate(task, from_attributes=True)


@router.get("/{task_id}", response_model=TaskRead)
def get_project_task(
    project_id: int,
    task_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> TaskRead:
    project = get_project_or_404(db, project_id)
    require_access(db, project, current_user, "view tasks")
    task = get_task_or_404(db, project, task_id)
    return TaskRead.model_validate(task, from_attributes=True)


@router.put("/{task_id}", response_model=TaskRead)
def update_project_task(
    project_id: int,
    task_id: int,
    payload: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> TaskRead:
    project = get_project_or_404(db, project_id)
    task = get_task_or_404(db, project, task_id)
    task = task_service.update_task(
        db, project, task, current_user, payload.model_dump(exclude_unset=True)
    )
    return TaskRead.model_validate(task, from_attributes=True)


@router.patch("/{task_id}/status", response_model=TaskRead)
def move_project_task(
    project_id: int,
    task_id: int,
    payload: TaskStatusUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> TaskRead:
    """
    Board drag-and-drop. Only board columns are valid targets; dropping a task
    on its current column succeeds.
    """
    project = get_project_or_404(db, project_id)
    task = get_task_or_404(db, project, task_id)
    task = task_service.move_task(db, project, task, current_user, payload.status)
    return TaskRead.model_validate(task, from_attributes=True)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_project_task(
    project_id: int,
    task_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> MessageResponse:
    project = get_project_or_404(db, project_id)
    task = get_task_or_404(db, project, task_id)
    task_service.delete_task(db, project, task, current_user)
    return MessageResponse(detail="Task deleted")
