"""Schemas for reactions and reaction types."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from forum.dependencies import MAX_RESOURCE_ID


class ReactionTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    image: str | None = None


class ReactRequest(BaseModel):
    """Body of POST /posts/{id}/react and POST /comments/{id}/react."""

    reaction_type_id: int = Field(..., gt=0, le=MAX_RESOURCE_ID)


class ReactionResponse(BaseModel):
    reaction_id: int
    reaction_type_id: int
    total_reaction: int
    message: str = "Reaction recorded"
