"""FastAPI authentication dependencies."""

from __future__ import annotations

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.service import get_user_by_id, validate_token
from forum.config import get_settings
from forum.database import get_session
from forum.db.models import User
from forum.errors import NotFoundError, UnauthenticatedError

_bearer = HTTPBearer(auto_error=False)


def get_jwt_secret() -> str:
    """Signing secret for bearer tokens. Overridden in tests."""
    return get_settings().jwt_secret


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> str:
    """Extract the raw token from ``Authorization: Bearer <token>``."""
    if credentials is None or not credentials.credentials:
        msg = "missing authorization token"
        raise UnauthenticatedError(msg)
    return credentials.credentials


async def get_current_user_id(
    token: str = Depends(get_bearer_token),
    secret: str = Depends(get_jwt_secret),
    db: AsyncSession = Depends(get_session),
) -> int:
    """Validate the bearer token against signature and token store, return the user ID."""
    return await validate_token(db, token, secret=secret)


async def get_current_user(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_session),
) -> User:
    """Same as get_current_user_id but loads the User row."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "user not found"
        raise NotFoundError(msg)
    return user
