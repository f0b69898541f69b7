"""Category and membership schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from forum.dependencies import MAX_RESOURCE_ID


class CategoryCreateRequest(BaseModel):
    name: str = Field("", max_length=150)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class SubscribeRequest(BaseModel):
    """Subscribe by category name."""

    category: str = ""


class UnsubscribeRequest(BaseModel):
    category_id: int = Field(..., gt=0, le=MAX_RESOURCE_ID)


class MembershipResponse(BaseModel):
    membership_id: int
    category_id: int
    category: str
    joined_date: datetime
