from datetime import datetime

from pydantic import BaseModel

from app.schemas.user import UserBase, UserPublic


class MemberAddRequest(UserBase):
    pass


class MemberRead(BaseModel):
    id: int
    project_id: int
    user: UserPublic
    is_owner: bool = False
    created_at: datetime

    model_config = {"from_attributes": True}


class MemberRemovalResponse(BaseModel):
    detail: str
    left_project: bool
