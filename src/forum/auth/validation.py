"""Input format checks for registration."""

from __future__ import annotations


def is_valid_email(email: str) -> bool:
    """Return True if the address has an '@' with a '.' somewhere after it."""
    at = email.find("@")
    return at != -1 and "." in email[at + 1 :]
