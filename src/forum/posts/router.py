"""Post endpoints: /posts/* and the posts of a category."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_current_user_id
from forum.categories.service import get_category
from forum.database import get_session
from forum.db.models import Post
from forum.dependencies import Page, ResourceId, get_page
from forum.posts.schemas import PostCreateRequest, PostResponse, PostUpdateRequest
from forum.posts.service import (
    create_post,
    delete_post,
    get_post,
    list_posts_by_category,
    list_posts_by_owner_and_category,
    update_post,
)
from forum.reactions.schemas import ReactionResponse, ReactRequest
from forum.reactions.service import (
    count_post_reactions,
    get_post_reaction,
    remove_post_reaction,
    require_reaction_type,
    upsert_post_reaction,
)
from forum.responses import Envelope, MessageResponse

router = APIRouter(tags=["Posts"])


async def build_post_response(db: AsyncSession, post: Post, viewer_id: int) -> PostResponse:
    """Attach the reaction total and the viewer's own reaction to a post."""
    reaction = await get_post_reaction(db, viewer_id, post.id)
    return PostResponse(
        id=post.id,
        owner_id=post.owner_id,
        category_id=post.category_id,
        headline=post.headline,
        text=post.text,
        image=post.image,
        created_at=post.created_at,
        updated_at=post.updated_at,
        edited=post.edited,
        total_reaction=await count_post_reactions(db, post.id),
        user_reaction=reaction.reaction_type_id if reaction else None,
    )


async def build_post_list(db: AsyncSession, posts: list[Post], viewer_id: int) -> list[PostResponse]:
    return [await build_post_response(db, p, viewer_id) for p in posts]


# ---------------------------------------------------------------------------
# Posts within a category
# ---------------------------------------------------------------------------


@router.get("/categories/{category_id}/posts", response_model=Envelope[list[PostResponse]])
async def category_posts(
    category_id: ResourceId,
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[PostResponse]]:
    """List posts in a category, newest first."""
    await get_category(db, category_id)
    posts = await list_posts_by_category(db, category_id, limit=page.limit, offset=page.offset)
    return Envelope(data=await build_post_list(db, posts, user_id))


@router.post("/categories/{category_id}/posts", response_model=Envelope[PostResponse], status_code=201)
async def new_post(
    category_id: ResourceId,
    body: PostCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[PostResponse]:
    """Create a post in a category."""
    post = await create_post(db, user_id, category_id, body.headline, text=body.text, image=body.image)
    await db.commit()
    return Envelope(data=await build_post_response(db, post, user_id))


@router.get("/categories/{category_id}/posts/user", response_model=Envelope[list[PostResponse]])
async def my_category_posts(
    category_id: ResourceId,
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[PostResponse]]:
    """The caller's own posts in a category."""
    await get_category(db, category_id)
    posts = await list_posts_by_owner_and_category(db, user_id, category_id, limit=page.limit, offset=page.offset)
    return Envelope(data=await build_post_list(db, posts, user_id))


# ---------------------------------------------------------------------------
# Single post
# ---------------------------------------------------------------------------


@router.get("/posts/{post_id}", response_model=Envelope[PostResponse])
async def post_detail(
    post_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[PostResponse]:
    post = await get_post(db, post_id)
    return Envelope(data=await build_post_response(db, post, user_id))


@router.put("/posts/{post_id}", response_model=Envelope[PostResponse])
async def edit_post(
    post_id: ResourceId,
    body: PostUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[PostResponse]:
    """Edit one of the caller's posts."""
    post = await update_post(db, user_id, post_id, headline=body.headline, text=body.text, image=body.image)
    await db.commit()
    return Envelope(data=await build_post_response(db, post, user_id))


@router.delete("/posts/{post_id}", response_model=Envelope[MessageResponse])
async def remove_post(
    post_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    """Delete one of the caller's posts."""
    await delete_post(db, user_id, post_id)
    await db.commit()
    return Envelope(data=MessageResponse(message="Post deleted"))


@router.post("/posts/{post_id}/react", response_model=Envelope[ReactionResponse])
async def react_to_post(
    post_id: ResourceId,
    body: ReactRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[ReactionResponse]:
    """Set the caller's reaction on a post, replacing any earlier one."""
    await get_post(db, post_id)
    await require_reaction_type(db, body.reaction_type_id)
    reaction = await upsert_post_reaction(db, user_id, post_id, body.reaction_type_id)
    await db.commit()
    return Envelope(
        data=ReactionResponse(
            reaction_id=reaction.id,
            reaction_type_id=reaction.reaction_type_id,
            total_reaction=await count_post_reactions(db, post_id),
        )
    )


@router.delete("/posts/{post_id}/react", response_model=Envelope[MessageResponse])
async def unreact_to_post(
    post_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    """Withdraw the caller's reaction on a post."""
    await get_post(db, post_id)
    await remove_post_reaction(db, user_id, post_id)
    await db.commit()
    return Envelope(data=MessageResponse(message="Reaction removed"))
