"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Registration request. Format rules are enforced by the service so they map to VALIDATION errors."""

    username: str = Field("", max_length=150)
    email: str = Field("", max_length=255)
    password: str = ""


class LoginRequest(BaseModel):
    """Login with email or username + password."""

    email: str | None = None
    username: str | None = None
    password: str = ""


class AuthResponse(BaseModel):
    """Returned on successful registration or login."""

    user_id: int
    username: str
    email: str
    profile_picture: str | None = None
    joined_date: datetime
    token: str
    expires_at: datetime


class VerifyResponse(BaseModel):
    user_id: int
    valid: bool
    status: str
