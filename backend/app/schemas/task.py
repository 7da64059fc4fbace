import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.enums import TaskStatus
from app.schemas.user import UserPublic

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
STATUS_MAX_LENGTH = 50


def _strip_required(value):
    if value is None:
        raise ValueError("must not be null")
    if isinstance(value, str):
        return value.strip()
    return value


class TaskBase(BaseModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    status: str = Field(min_length=1, max_length=STATUS_MAX_LENGTH)

    @field_validator("title", "description", "status", mode="before")
    @classmethod
    def _strip(cls, value):
        return _strip_required(value)


class TaskCreate(TaskBase):
    assignee_id: Optional[uuid.UUID] = None


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    status: Optional[str] = Field(default=None, min_length=1, max_length=STATUS_MAX_LENGTH)
    assignee_id: Optional[uuid.UUID] = None

    @field_validator("title", "description", "status", "assignee_id", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # Validators only run for values present in the body, so null means an explicit null
        return _strip_required(value)


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskRead(BaseModel):
    id: int
    title: str
    description: str
    status: str
    project_id: int
    assignee_id: uuid.UUID
    assignee: Optional[UserPublic] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
