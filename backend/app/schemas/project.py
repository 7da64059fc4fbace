import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.membership import MemberRead
from app.schemas.task import TaskRead
from app.schemas.user import UserPublic

NAME_MAX_LENGTH = 255


class ProjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        if value is None:
            raise ValueError("name must not be null")
        return value.strip() if isinstance(value, str) else value


class ProjectRead(ProjectBase):
    id: int
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectCounts(BaseModel):
    members: int = 0
    tasks: int = 0


class ProjectListItem(ProjectRead):
    owner: UserPublic
    counts: ProjectCounts


class ProjectDetail(ProjectRead):
    owner: UserPublic
    members: List[MemberRead] = []
    tasks: List[TaskRead] = []
    counts: ProjectCounts


class ProjectMembersResponse(BaseModel):
    project: ProjectRead
    owner: UserPublic
    items: List[MemberRead]


class TaskListResponse(BaseModel):
    project: ProjectRead
    items: List[TaskRead]
    total: int


class BoardColumn(BaseModel):
    status: str
    title: str
    tasks: List[TaskRead]


class BoardResponse(BaseModel):
    project: ProjectRead
    columns: List[BoardColumn]
    # Tasks whose status is not a board column (e.g. legacy "pending")
    other: List[TaskRead] = []
