"""Authentication router: all /auth/* endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_bearer_token, get_current_user_id, get_jwt_secret
from forum.auth.schemas import AuthResponse, LoginRequest, RegisterRequest, VerifyResponse
from forum.auth.service import authenticate_user, issue_token, register_user, revoke_token
from forum.config import get_settings
from forum.database import get_session
from forum.db.models import User
from forum.responses import Envelope, MessageResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, token: str, expires_at: datetime) -> AuthResponse:
    """Build an AuthResponse from a User model and its fresh token."""
    return AuthResponse(
        user_id=user.id,
        username=user.username,
        email=user.email,
        profile_picture=user.profile_picture,
        joined_date=user.created_at,
        token=token,
        expires_at=expires_at,
    )


async def _issue(db: AsyncSession, user: User, secret: str) -> AuthResponse:
    """Issue a token for the user and commit."""
    settings = get_settings()
    token, expires_at = await issue_token(
        db,
        user.id,
        secret=secret,
        lifetime=timedelta(hours=settings.token_lifetime_hours),
        algorithm=settings.jwt_algorithm,
    )
    await db.commit()
    return _auth_response(user, token, expires_at)


@router.post("/register", response_model=Envelope[AuthResponse])
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
    secret: str = Depends(get_jwt_secret),
) -> Envelope[AuthResponse]:
    """Register with username + email + password and receive a bearer token."""
    user = await register_user(db, username=body.username, email=body.email, password=body.password)
    return Envelope(data=await _issue(db, user, secret))


@router.post("/login", response_model=Envelope[AuthResponse])
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
    secret: str = Depends(get_jwt_secret),
) -> Envelope[AuthResponse]:
    """Log in with email or username + password."""
    user = await authenticate_user(db, body.password, email=body.email, username=body.username)
    return Envelope(data=await _issue(db, user, secret))


@router.get("/verify", response_model=VerifyResponse)
async def verify(user_id: int = Depends(get_current_user_id)) -> VerifyResponse:
    """Report whether the presented bearer token is live."""
    return VerifyResponse(user_id=user_id, valid=True, status="authenticated")


@router.post("/logout", response_model=Envelope[MessageResponse])
async def logout(
    _user_id: int = Depends(get_current_user_id),
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_session),
) -> Envelope[MessageResponse]:
    """Revoke the presented bearer token."""
    await revoke_token(db, token)
    await db.commit()
    return Envelope(data=MessageResponse(message="Logout successfully!"))
