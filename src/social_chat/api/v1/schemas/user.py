from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    fullname: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=32)


class UpdateProfileRequest(BaseModel):
    fullname: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = Field(default=None, max_length=32)
    avatar: str | None = Field(default=None, max_length=512)


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    fullname: str
    phone: str | None
    avatar: str | None
    friends: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}
