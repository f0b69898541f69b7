"""Post request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PostCreateRequest(BaseModel):
    headline: str = Field("", max_length=255)
    text: str | None = None
    image: str | None = Field(None, max_length=255)


class PostUpdateRequest(BaseModel):
    headline: str | None = Field(None, max_length=255)
    text: str | None = None
    image: str | None = Field(None, max_length=255)


class PostResponse(BaseModel):
    id: int
    owner_id: int
    category_id: int
    headline: str
    text: str | None = None
    image: str | None = None
    created_at: datetime
    updated_at: datetime
    edited: bool
    total_reaction: int = 0
    user_reaction: int | None = None
