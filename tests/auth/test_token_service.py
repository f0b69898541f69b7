"""Tests for the token store and credential checks at the service layer."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.jwt import create_token
from forum.auth.service import (
    authenticate_user,
    get_token,
    issue_token,
    register_user,
    revoke_token,
    validate_token,
)
from forum.db.models import Token
from forum.errors import ConflictError, UnauthenticatedError, ValidationError

SECRET = "service-test-secret-0123456789abcdef"


async def _user(db: AsyncSession, name: str = "carol") -> int:
    user = await register_user(db, name, f"{name}@example.com", "SecureP@ss1")
    await db.commit()
    return user.id


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_hashes_password(self, db_session: AsyncSession):
        user = await register_user(db_session, "carol", "carol@example.com", "SecureP@ss1")
        assert user.id > 0
        assert user.password_hash != "SecureP@ss1"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session: AsyncSession):
        await _user(db_session)
        with pytest.raises(ConflictError, match="email or username already exists"):
            await register_user(db_session, "someone", "carol@example.com", "SecureP@ss1")

    @pytest.mark.asyncio
    async def test_duplicate_username(self, db_session: AsyncSession):
        await _user(db_session)
        with pytest.raises(ConflictError):
            await register_user(db_session, "carol", "other@example.com", "SecureP@ss1")

    @pytest.mark.asyncio
    async def test_username_stored_stripped(self, db_session: AsyncSession):
        user = await register_user(db_session, "  carol ", "carol@example.com", "SecureP@ss1")
        assert user.username == "carol"

    @pytest.mark.asyncio
    async def test_padded_username_conflicts(self, db_session: AsyncSession):
        await _user(db_session)
        with pytest.raises(ConflictError):
            await register_user(db_session, " carol", "other@example.com", "SecureP@ss1")

    @pytest.mark.asyncio
    async def test_long_password_registers(self, db_session: AsyncSession):
        user = await register_user(db_session, "carol", "carol@example.com", "p" * 129)
        authenticated = await authenticate_user(db_session, "p" * 129, username="carol")
        assert authenticated.id == user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("username", "email", "password"),
        [
            ("", "a@b.c", "SecureP@ss1"),
            ("   ", "a@b.c", "SecureP@ss1"),
            ("dave", "", "SecureP@ss1"),
            ("dave", "a@b.c", ""),
            ("dave", "no-at-sign.com", "SecureP@ss1"),
            ("dave", "dot@before", "SecureP@ss1"),
            ("dave", "a@b.c", "short"),
        ],
    )
    async def test_invalid_input(self, db_session: AsyncSession, username, email, password):
        with pytest.raises(ValidationError):
            await register_user(db_session, username, email, password)


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_by_email_and_username(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        by_email = await authenticate_user(db_session, "SecureP@ss1", email="carol@example.com")
        by_name = await authenticate_user(db_session, "SecureP@ss1", username="carol")
        assert by_email.id == by_name.id == user_id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, db_session: AsyncSession):
        await _user(db_session)
        with pytest.raises(UnauthenticatedError) as wrong:
            await authenticate_user(db_session, "WrongP@ss1", email="carol@example.com")
        with pytest.raises(UnauthenticatedError) as unknown:
            await authenticate_user(db_session, "WrongP@ss1", email="nobody@example.com")
        assert wrong.value.message == unknown.value.message == "invalid credentials"

    @pytest.mark.asyncio
    async def test_missing_identifier(self, db_session: AsyncSession):
        with pytest.raises(ValidationError):
            await authenticate_user(db_session, "SecureP@ss1")


class TestTokenStore:
    @pytest.mark.asyncio
    async def test_issue_then_validate(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        token, expires_at = await issue_token(db_session, user_id, secret=SECRET)
        await db_session.commit()

        assert await validate_token(db_session, token, secret=SECRET) == user_id
        stored = await get_token(db_session, token)
        assert stored is not None
        assert stored.user_id == user_id
        assert expires_at > datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_revoked_token_fails_although_signature_verifies(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        token, _ = await issue_token(db_session, user_id, secret=SECRET)
        await db_session.commit()

        await revoke_token(db_session, token)
        await db_session.commit()

        with pytest.raises(UnauthenticatedError):
            await validate_token(db_session, token, secret=SECRET)

    @pytest.mark.asyncio
    async def test_second_revoke_fails_cleanly(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        token, _ = await issue_token(db_session, user_id, secret=SECRET)
        await revoke_token(db_session, token)
        with pytest.raises(UnauthenticatedError):
            await revoke_token(db_session, token)

    @pytest.mark.asyncio
    async def test_unstored_token_rejected(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        token, _ = create_token(user_id, SECRET)
        with pytest.raises(UnauthenticatedError):
            await validate_token(db_session, token, secret=SECRET)

    @pytest.mark.asyncio
    async def test_store_expiry_enforced(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        token, _ = await issue_token(db_session, user_id, secret=SECRET)
        await db_session.execute(
            update(Token)
            .where(Token.token == token)
            .values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        )
        await db_session.commit()

        with pytest.raises(UnauthenticatedError):
            await validate_token(db_session, token, secret=SECRET)

    @pytest.mark.asyncio
    async def test_wrong_secret_rejected(self, db_session: AsyncSession):
        user_id = await _user(db_session)
        token, _ = await issue_token(db_session, user_id, secret=SECRET)
        await db_session.commit()
        with pytest.raises(UnauthenticatedError):
            await validate_token(db_session, token, secret="another-secret-0123456789abcdefgh")

    @pytest.mark.asyncio
    async def test_tokens_removed_with_user(self, db_session: AsyncSession):
        from forum.users.service import delete_account

        user_id = await _user(db_session)
        await issue_token(db_session, user_id, secret=SECRET)
        await db_session.commit()

        await delete_account(db_session, user_id)
        await db_session.commit()

        result = await db_session.execute(select(Token).where(Token.user_id == user_id))
        assert result.scalars().all() == []
