import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_MIN_LENGTH = 6


def normalize_email(value: str) -> str:
    """Canonical form used for storage and every lookup by email."""
    return value.strip().lower()


class UserBase(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value) if isinstance(value, str) else value


class UserCreate(UserBase):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class UserPublic(BaseModel):
    id: uuid.UUID
    email: str

    model_config = {"from_attributes": True}


class UserRead(UserPublic):
    created_at: datetime


class UserLogin(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class UserSearchResponse(BaseModel):
    items: List[UserPublic]
