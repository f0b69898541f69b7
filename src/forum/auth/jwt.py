"""
HS256 JWT bearer tokens.

The signing secret is always passed in by the caller; nothing in this module
reads configuration, so tests can sign and verify with a fixed secret.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)


def new_token_id() -> str:
    """Random JWT ID (16 bytes, hex encoded) so two tokens never collide."""
    return secrets.token_hex(16)


def create_token(
    user_id: int,
    secret: str,
    *,
    lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """
    Sign a bearer token for a user.

    Args:
        user_id: The user's database ID, stored as the ``sub`` claim.
        secret: Shared HMAC signing secret.
        lifetime: How long the token stays valid.
        algorithm: One of the HMAC algorithms.
        now: Issue time (defaults to the current UTC time).

    Returns:
        Tuple of (encoded JWT string, expiry timestamp).
    """
    if algorithm not in HMAC_ALGORITHMS:
        msg = f"Unsupported signing algorithm: {algorithm}"
        raise ValueError(msg)

    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + lifetime
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": expires_at,
        "jti": new_token_id(),
    }
    return jwt.encode(payload, secret, algorithm=algorithm), expires_at


def verify_token(token: str, secret: str) -> int:
    """
    Verify a bearer token's signature and claims.

    Returns:
        The user ID from the ``sub`` claim.

    Raises:
        jwt.InvalidTokenError: If the token is empty, malformed, signed with a
            non-HMAC algorithm, has a bad signature, is expired, or carries a
            subject that is not a positive integer.
    """
    if not token:
        msg = "Token is empty"
        raise jwt.InvalidTokenError(msg)

    # Reject algorithm substitution (e.g. "none" or RS256 with the secret as a public key)
    header = jwt.get_unverified_header(token)
    if header.get("alg") not in HMAC_ALGORITHMS:
        msg = "Unexpected signing method"
        raise jwt.InvalidTokenError(msg)

    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            secret,
            algorithms=list(HMAC_ALGORITHMS),
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    subject = payload.get("sub")
    try:
        user_id = int(subject)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        msg = "Invalid token subject"
        raise jwt.InvalidTokenError(msg) from None
    if user_id <= 0:
        msg = "Invalid token subject"
        raise jwt.InvalidTokenError(msg)

    return user_id
