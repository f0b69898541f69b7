"""
Authentication business logic.

Handles registration, credential checks, and the token store. A bearer token
is live only when its signature verifies AND its row is still present and
unexpired, so deleting the row revokes it immediately.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import jwt
import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from forum.auth.jwt import DEFAULT_TOKEN_LIFETIME, create_token, verify_token
from forum.auth.password import (
    PasswordStrengthError,
    burn_verify,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from forum.auth.validation import is_valid_email
from forum.db.models import Token, User
from forum.errors import ConflictError, UnauthenticatedError, ValidationError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

INVALID_CREDENTIALS = "invalid credentials"
INVALID_TOKEN = "invalid token"


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Registration & login
# ---------------------------------------------------------------------------


async def register_user(db: AsyncSession, username: str, email: str, password: str) -> User:
    """
    Register a new user with username + email + password.

    Raises:
        ValidationError: If a field is missing, the email is malformed, or the password is too short.
        ConflictError: If the username or email is already taken.
    """
    username = username.strip()
    if not username or not email or not password:
        msg = "username, email, and password are required"
        raise ValidationError(msg)
    if not is_valid_email(email):
        msg = "invalid email format"
        raise ValidationError(msg)
    try:
        validate_password_strength(password)
    except PasswordStrengthError as e:
        raise ValidationError(str(e)) from e

    if await get_user_by_email(db, email) is not None or await get_user_by_username(db, username) is not None:
        msg = "email or username already exists"
        raise ConflictError(msg)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        created_at=datetime.now(timezone.utc),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent registration
        await db.rollback()
        msg = "email or username already exists"
        raise ConflictError(msg) from e

    logger.info("user_registered", user_id=user.id, username=username)
    return user


async def authenticate_user(
    db: AsyncSession,
    password: str,
    *,
    email: str | None = None,
    username: str | None = None,
) -> User:
    """
    Check credentials by email (preferred) or username.

    Raises:
        ValidationError: If the password or both identifiers are missing.
        UnauthenticatedError: On an unknown user or a wrong password. Both
            cases produce the same message.
    """
    if not password:
        msg = "password is required"
        raise ValidationError(msg)
    if not email and not username:
        msg = "email or username is required"
        raise ValidationError(msg)

    if email:
        user = await get_user_by_email(db, email)
    else:
        user = await get_user_by_username(db, username or "")

    if user is None:
        burn_verify(password)
        logger.info("login_failed", reason="unknown_user")
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    if not verify_password(password, user.password_hash):
        logger.info("login_failed", user_id=user.id, reason="bad_password")
        raise UnauthenticatedError(INVALID_CREDENTIALS)

    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        await db.flush()
        logger.info("password_rehashed", user_id=user.id)

    return user


# ---------------------------------------------------------------------------
# Token store
# ---------------------------------------------------------------------------


async def issue_token(
    db: AsyncSession,
    user_id: int,
    *,
    secret: str,
    lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    algorithm: str = "HS256",
) -> tuple[str, datetime]:
    """
    Sign a token for ``user_id`` and persist it with the same expiry.

    Returns:
        Tuple of (token string, expiry).
    """
    token, expires_at = create_token(user_id, secret, lifetime=lifetime, algorithm=algorithm)
    db.add(Token(user_id=user_id, token=token, expires_at=expires_at))
    await db.flush()
    logger.info("token_issued", user_id=user_id, expires_at=expires_at.isoformat())
    return token, expires_at


async def get_token(db: AsyncSession, token: str) -> Token | None:
    """Look up a stored token by its string."""
    result = await db.execute(select(Token).where(Token.token == token))
    return result.scalar_one_or_none()


async def validate_token(db: AsyncSession, token: str, *, secret: str) -> int:
    """
    Validate a bearer token and return its user ID.

    Both checks must pass: the signature/claims verify against ``secret``,
    and a matching unexpired row exists in the token store.

    Raises:
        UnauthenticatedError: If either check fails.
    """
    try:
        user_id = verify_token(token, secret)
    except jwt.InvalidTokenError as e:
        raise UnauthenticatedError(INVALID_TOKEN) from e

    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(Token.id).where(Token.token == token, Token.expires_at > now)
    )
    if result.scalar_one_or_none() is None:
        raise UnauthenticatedError(INVALID_TOKEN)
    return user_id


async def revoke_token(db: AsyncSession, token: str) -> None:
    """
    Delete a stored token so it can no longer authenticate.

    Raises:
        UnauthenticatedError: If the token is not in the store (never issued
            or already revoked).
    """
    stored = await get_token(db, token)
    if stored is None:
        raise UnauthenticatedError(INVALID_TOKEN)
    await db.execute(delete(Token).where(Token.id == stored.id))
    await db.flush()
    logger.info("token_revoked", user_id=stored.user_id)
