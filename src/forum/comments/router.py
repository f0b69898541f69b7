"""Comment endpoints: /comments/*, comments of a post, and the caller's comments in a category."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_current_user_id
from forum.categories.service import get_category
from forum.comments.schemas import CommentCreateRequest, CommentResponse, CommentUpdateRequest
from forum.comments.service import (
    create_comment,
    delete_comment,
    get_comment,
    list_comments_by_owner_and_category,
    list_comments_by_post,
    list_replies,
    reply_to_comment,
    update_comment,
)
from forum.database import get_session
from forum.db.models import Comment
from forum.dependencies import Page, ResourceId, get_page
from forum.posts.service import get_post
from forum.reactions.schemas import ReactionResponse, ReactRequest
from forum.reactions.service import (
    count_comment_reactions,
    get_comment_reaction,
    remove_comment_reaction,
    require_reaction_type,
    upsert_comment_reaction,
)
from forum.responses import Envelope, MessageResponse

router = APIRouter(tags=["Comments"])


async def build_comment_response(db: AsyncSession, comment: Comment, viewer_id: int) -> CommentResponse:
    """Attach owner details, the reaction total and the viewer's own reaction."""
    reaction = await get_comment_reaction(db, viewer_id, comment.id)
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        owner_id=comment.owner_id,
        owner_username=comment.owner.username,
        owner_profile_picture=comment.owner.profile_picture,
        parent_comment_id=comment.parent_comment_id,
        text=comment.text,
        image=comment.image,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        edited=comment.edited,
        total_reaction=await count_comment_reactions(db, comment.id),
        user_reaction=reaction.reaction_type_id if reaction else None,
    )


async def build_comment_list(db: AsyncSession, comments: list[Comment], viewer_id: int) -> list[CommentResponse]:
    return [await build_comment_response(db, c, viewer_id) for c in comments]


# ---------------------------------------------------------------------------
# Comments on a post / in a category
# ---------------------------------------------------------------------------


@router.get("/posts/{post_id}/comments", response_model=Envelope[list[CommentResponse]])
async def post_comments(
    post_id: ResourceId,
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[CommentResponse]]:
    """Top-level comments on a post, oldest first."""
    await get_post(db, post_id)
    comments = await list_comments_by_post(db, post_id, limit=page.limit, offset=page.offset)
    return Envelope(data=await build_comment_list(db, comments, user_id))


@router.post("/posts/{post_id}/comments", response_model=Envelope[CommentResponse], status_code=201)
async def new_comment(
    post_id: ResourceId,
    body: CommentCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[CommentResponse]:
    comment = await create_comment(db, user_id, post_id, body.text, image=body.image)
    await db.commit()
    return Envelope(data=await build_comment_response(db, comment, user_id))


@router.get("/categories/{category_id}/comments/user", response_model=Envelope[list[CommentResponse]])
async def my_category_comments(
    category_id: ResourceId,
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[CommentResponse]]:
    """The caller's comments on posts in a category."""
    await get_category(db, category_id)
    comments = await list_comments_by_owner_and_category(
        db, user_id, category_id, limit=page.limit, offset=page.offset
    )
    return Envelope(data=await build_comment_list(db, comments, user_id))


# ---------------------------------------------------------------------------
# Single comment
# ---------------------------------------------------------------------------


@router.get("/comments/{comment_id}", response_model=Envelope[CommentResponse])
async def comment_detail(
    comment_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[CommentResponse]:
    comment = await get_comment(db, comment_id)
    return Envelope(data=await build_comment_response(db, comment, user_id))


@router.put("/comments/{comment_id}", response_model=Envelope[CommentResponse])
async def edit_comment(
    comment_id: ResourceId,
    body: CommentUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[CommentResponse]:
    """Edit one of the caller's comments."""
    comment = await update_comment(db, user_id, comment_id, text=body.text, image=body.image)
    await db.commit()
    return Envelope(data=await build_comment_response(db, comment, user_id))


@router.delete("/comments/{comment_id}", response_model=Envelope[MessageResponse])
async def remove_comment(
    comment_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    """Delete one of the caller's comments."""
    await delete_comment(db, user_id, comment_id)
    await db.commit()
    return Envelope(data=MessageResponse(message="Comment deleted"))


@router.get("/comments/{comment_id}/replies", response_model=Envelope[list[CommentResponse]])
async def comment_replies(
    comment_id: ResourceId,
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[CommentResponse]]:
    await get_comment(db, comment_id)
    replies = await list_replies(db, comment_id, limit=page.limit, offset=page.offset)
    return Envelope(data=await build_comment_list(db, replies, user_id))


@router.post("/comments/{comment_id}/replies", response_model=Envelope[CommentResponse], status_code=201)
async def new_reply(
    comment_id: ResourceId,
    body: CommentCreateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[CommentResponse]:
    """Reply to a comment."""
    reply = await reply_to_comment(db, user_id, comment_id, body.text, image=body.image)
    await db.commit()
    return Envelope(data=await build_comment_response(db, reply, user_id))


@router.post("/comments/{comment_id}/react", response_model=Envelope[ReactionResponse])
async def react_to_comment(
    comment_id: ResourceId,
    body: ReactRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[ReactionResponse]:
    """Set the caller's reaction on a comment, replacing any earlier one."""
    await get_comment(db, comment_id)
    await require_reaction_type(db, body.reaction_type_id)
    reaction = await upsert_comment_reaction(db, user_id, comment_id, body.reaction_type_id)
    await db.commit()
    return Envelope(
        data=ReactionResponse(
            reaction_id=reaction.id,
            reaction_type_id=reaction.reaction_type_id,
            total_reaction=await count_comment_reactions(db, comment_id),
        )
    )


@router.delete("/comments/{comment_id}/react", response_model=Envelope[MessageResponse])
async def unreact_to_comment(
    comment_id: ResourceId,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    """Withdraw the caller's reaction on a comment."""
    await get_comment(db, comment_id)
    await remove_comment_reaction(db, user_id, comment_id)
    await db.commit()
    return Envelope(data=MessageResponse(message="Reaction removed"))
