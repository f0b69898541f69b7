"""Category endpoints: /categories/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_current_user_id
from forum.categories.schemas import CategoryCreateRequest, CategoryResponse
from forum.categories.service import create_category, get_category, list_categories
from forum.database import get_session
from forum.dependencies import ResourceId
from forum.responses import Envelope

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=Envelope[list[CategoryResponse]])
async def all_categories(
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[CategoryResponse]]:
    categories = await list_categories(db)
    return Envelope(data=[CategoryResponse.model_validate(c) for c in categories])


@router.post("", response_model=Envelope[CategoryResponse], status_code=201)
async def new_category(
    body: CategoryCreateRequest,
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[CategoryResponse]:
    """Create a category."""
    category = await create_category(db, body.name)
    await db.commit()
    return Envelope(data=CategoryResponse.model_validate(category))


@router.get("/{category_id}", response_model=Envelope[CategoryResponse])
async def category_detail(
    category_id: ResourceId,
    _user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[CategoryResponse]:
    category = await get_category(db, category_id)
    return Envelope(data=CategoryResponse.model_validate(category))
