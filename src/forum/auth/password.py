"""
Password hashing and validation using argon2id.

Argon2id is the winner of the Password Hashing Competition and is resistant
to both GPU-based and side-channel attacks.
"""

from __future__ import annotations

import argon2

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,  # argon2id
)

PASSWORD_MIN_LENGTH = 8

# Verified against when the user does not exist, so a missing account costs the same as a wrong password.
_DUMMY_HASH = _hasher.hash("dummy-password-for-timing")


class PasswordStrengthError(ValueError):
    """Raised when a password does not meet length requirements."""


def hash_password(password: str) -> str:
    """Hash a password using argon2id. Returns the full hash string."""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its argon2id hash.

    Returns True if the password matches. Never raises on mismatch.
    """
    try:
        return _hasher.verify(password_hash, password)
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def burn_verify(password: str) -> None:
    """Run a throwaway verification against a fixed hash."""
    verify_password(password, _DUMMY_HASH)


def check_needs_rehash(password_hash: str) -> bool:
    """Check if the hash needs to be updated (parameters changed)."""
    return _hasher.check_needs_rehash(password_hash)


def validate_password_strength(password: str) -> None:
    """
    Validate password length.

    Raises PasswordStrengthError if the password is empty or shorter than 8
    characters. There is no upper bound; argon2 accepts input of any length.
    """
    if not password:
        msg = "password is required"
        raise PasswordStrengthError(msg)
    if len(password) < PASSWORD_MIN_LENGTH:
        msg = f"password must be at least {PASSWORD_MIN_LENGTH} characters"
        raise PasswordStrengthError(msg)
