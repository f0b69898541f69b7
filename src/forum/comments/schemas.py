"""Comment request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreateRequest(BaseModel):
    text: str = ""
    image: str | None = Field(None, max_length=255)


class CommentUpdateRequest(BaseModel):
    text: str | None = None
    image: str | None = Field(None, max_length=255)


class CommentResponse(BaseModel):
    id: int
    post_id: int
    owner_id: int
    owner_username: str
    owner_profile_picture: str | None = None
    parent_comment_id: int | None = None
    text: str
    image: str | None = None
    created_at: datetime
    updated_at: datetime
    edited: bool
    total_reaction: int = 0
    user_reaction: int | None = None
