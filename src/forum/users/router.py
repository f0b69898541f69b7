"""User endpoints: /users/{id} and the caller's own /user/* resources."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_current_user, get_current_user_id
from forum.categories.schemas import MembershipResponse, SubscribeRequest, UnsubscribeRequest
from forum.categories.service import get_category, list_user_memberships, subscribe, unsubscribe
from forum.comments.router import build_comment_list
from forum.comments.schemas import CommentResponse
from forum.comments.service import list_comments_by_owner, list_comments_by_owner_and_category
from forum.database import get_session
from forum.db.models import Membership, User
from forum.dependencies import Page, ResourceId, get_page
from forum.posts.router import build_post_list
from forum.posts.schemas import PostResponse
from forum.posts.service import list_posts_by_owner
from forum.responses import Envelope, MessageResponse
from forum.users.schemas import ProfilePictureRequest, UsernameUpdateRequest, UserResponse
from forum.users.service import (
    delete_account,
    delete_profile_picture,
    get_account,
    set_profile_picture,
    update_username,
)

router = APIRouter(tags=["Users"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        user_id=user.id,
        username=user.username,
        email=user.email,
        profile_picture=user.profile_picture,
        joined_date=user.created_at,
    )


def _membership_response(membership: Membership) -> MembershipResponse:
    return MembershipResponse(
        membership_id=membership.id,
        category_id=membership.category_id,
        category=membership.category.name,
        joined_date=membership.joined_date,
    )


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@router.get("/users/{user_id}", response_model=Envelope[UserResponse])
async def user_detail(
    user_id: ResourceId,
    _caller_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[UserResponse]:
    user = await get_account(db, user_id)
    return Envelope(data=_user_response(user))


@router.get("/user", response_model=Envelope[UserResponse])
async def me(user: User = Depends(get_current_user)) -> Envelope[UserResponse]:
    """The caller's own account."""
    return Envelope(data=_user_response(user))


@router.put("/user/username", response_model=Envelope[UserResponse])
async def change_username(
    body: UsernameUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[UserResponse]:
    user = await update_username(db, user_id, body.username)
    await db.commit()
    return Envelope(data=_user_response(user))


@router.put("/user/profile-picture", response_model=Envelope[UserResponse])
async def change_profile_picture(
    body: ProfilePictureRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[UserResponse]:
    user = await set_profile_picture(db, user_id, body.profile_picture)
    await db.commit()
    return Envelope(data=_user_response(user))


@router.delete("/user/profile-picture", response_model=Envelope[UserResponse])
async def remove_profile_picture(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[UserResponse]:
    user = await delete_profile_picture(db, user_id)
    await db.commit()
    return Envelope(data=_user_response(user))


@router.delete("/user", response_model=Envelope[MessageResponse])
async def remove_account(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    """Delete the caller's account and everything it owns."""
    await delete_account(db, user_id)
    await db.commit()
    return Envelope(data=MessageResponse(message="User deleted"))


# ---------------------------------------------------------------------------
# The caller's content
# ---------------------------------------------------------------------------


@router.get("/user/posts", response_model=Envelope[list[PostResponse]])
async def my_posts(
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[PostResponse]]:
    posts = await list_posts_by_owner(db, user_id, limit=page.limit, offset=page.offset)
    return Envelope(data=await build_post_list(db, posts, user_id))


@router.get("/user/comments", response_model=Envelope[list[CommentResponse]])
async def my_comments(
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[CommentResponse]]:
    comments = await list_comments_by_owner(db, user_id, limit=page.limit, offset=page.offset)
    return Envelope(data=await build_comment_list(db, comments, user_id))


@router.get("/user/comments/category/{category_id}", response_model=Envelope[list[CommentResponse]])
async def my_comments_in_category(
    category_id: ResourceId,
    page: Page = Depends(get_page),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[CommentResponse]]:
    await get_category(db, category_id)
    comments = await list_comments_by_owner_and_category(
        db, user_id, category_id, limit=page.limit, offset=page.offset
    )
    return Envelope(data=await build_comment_list(db, comments, user_id))


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


@router.get("/user/categories", response_model=Envelope[list[MembershipResponse]])
async def my_categories(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[list[MembershipResponse]]:
    """Categories the caller is subscribed to, most recent first."""
    memberships = await list_user_memberships(db, user_id)
    return Envelope(data=[_membership_response(m) for m in memberships])


@router.post("/user/subscribe", response_model=Envelope[MembershipResponse])
async def subscribe_category(
    body: SubscribeRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MembershipResponse]:
    """Subscribe to a category by name. Subscribing again returns the existing membership."""
    membership = await subscribe(db, user_id, body.category)
    await db.commit()
    return Envelope(data=_membership_response(membership))


@router.post("/user/unsubscribe", response_model=Envelope[MessageResponse])
async def unsubscribe_category(
    body: UnsubscribeRequest,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    await unsubscribe(db, user_id, body.category_id)
    await db.commit()
    return Envelope(data=MessageResponse(message="Unsubscribed"))
