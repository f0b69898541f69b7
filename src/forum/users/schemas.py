"""User profile schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """Public account view. The password hash is never included."""

    user_id: int
    username: str
    email: str
    profile_picture: str | None = None
    joined_date: datetime


class UsernameUpdateRequest(BaseModel):
    username: str = Field("", max_length=150)


class ProfilePictureRequest(BaseModel):
    profile_picture: str = Field("", max_length=255)
