"""Pydantic schemas for user endpoints.

None of these expose ``password_hash``, ``refresh_token_hash`` or
``reset_password_token``.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    role_id: int | None
    role_name: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UpdateUserRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    email: str = Field(min_length=3, max_length=256)


class UserListResponse(BaseModel):
    items: list[UserProfile]
    total: int
