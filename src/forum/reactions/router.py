"""Reaction type catalogue endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_current_user_id
from forum.database import get_session
from forum.reactions.schemas import ReactionTypeResponse
from forum.reactions.service import list_reaction_types
from forum.responses import Envelope

router = APIRouter(tags=["Reactions"])


@router.get("/reaction-types", response_model=Envelope[list[ReactionTypeResponse]])
async def reaction_types(
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[ReactionTypeResponse]]:
    """List the reaction types a post or comment can receive."""
    types = await list_reaction_types(db)
    return Envelope(data=[ReactionTypeResponse.model_validate(t) for t in types])
