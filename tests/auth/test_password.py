"""Tests for password hashing and validation."""

import pytest

from forum.auth.password import (
    PasswordStrengthError,
    burn_verify,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        password = "SecureP@ss1"
        hashed = hash_password(password)
        assert verify_password(password, hashed) is True

    def test_wrong_password_rejected(self):
        hashed = hash_password("CorrectP@ss1")
        assert verify_password("WrongP@ss1", hashed) is False

    def test_hash_is_argon2id(self):
        assert hash_password("SecureP@ss1").startswith("$argon2id$")

    def test_invalid_hash_does_not_raise(self):
        assert verify_password("anything", "not-a-hash") is False

    def test_fresh_hash_needs_no_rehash(self):
        assert check_needs_rehash(hash_password("SecureP@ss1")) is False

    def test_burn_verify_returns_nothing(self):
        assert burn_verify("whatever") is None


class TestPasswordStrength:
    def test_minimum_length_accepted(self):
        validate_password_strength("abcdefgh")

    def test_very_long_password_accepted(self):
        validate_password_strength("a" * 4096)

    def test_empty_password_rejected(self):
        with pytest.raises(PasswordStrengthError, match="required"):
            validate_password_strength("")

    def test_short_password_rejected(self):
        with pytest.raises(PasswordStrengthError, match="at least 8"):
            validate_password_strength("Short1!")

    def test_long_password_hashes_and_verifies(self):
        password = "Long-p@ss-" * 100
        validate_password_strength(password)
        assert verify_password(password, hash_password(password)) is True
