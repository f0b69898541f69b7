"""Shared test fixtures.

Every test gets a fresh SQLite database file, so tests never share rows.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.dependencies import get_jwt_secret
from forum.config import get_settings
from forum.database import close_db, get_engine, get_session, init_db
from forum.db.base import Base
from forum.main import create_app
from forum.reactions.service import seed_reaction_types
from forum.storage.s3 import BaseStorageProvider, StorageError, get_storage

TEST_JWT_SECRET = "test-signing-secret-0123456789abcdef"


class FakeStorage(BaseStorageProvider):
    """Records presign requests instead of talking to S3."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []
        self.fail = False

    async def create_presigned_upload_url(self, key: str, expires_in: int) -> str:
        if self.fail:
            raise StorageError
        self.calls.append((key, expires_in))
        return f"https://uploads.test/{key}?X-Amz-Expires={expires_in}"


@pytest_asyncio.fixture
async def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None, None]:
    """Create the schema in a per-test SQLite file and seed reaction types."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'forum.db'}"
    monkeypatch.setenv("FORUM_DATABASE_URL", url)
    get_settings.cache_clear()

    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    sessions = get_session()
    session = await anext(sessions)
    await seed_reaction_types(session, get_settings().seed_reaction_types)
    await sessions.aclose()

    yield

    await close_db()
    get_settings.cache_clear()


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest_asyncio.fixture
async def client(database: None, fake_storage: FakeStorage) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with a fixed JWT secret and fake storage."""
    app = create_app()
    app.dependency_overrides[get_jwt_secret] = lambda: TEST_JWT_SECRET
    app.dependency_overrides[get_storage] = lambda: fake_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(database: None) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service calls and assertions."""
    sessions = get_session()
    yield await anext(sessions)
    await sessions.aclose()


def auth(token: str) -> dict[str, str]:
    """Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}


async def register(client: AsyncClient, username: str, password: str = "SecureP@ss1") -> dict:
    """Register a user via the API. Returns the auth payload (user_id, token, ...)."""
    response = await client.post(
        "/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def create_category(client: AsyncClient, token: str, name: str = "general") -> int:
    response = await client.post("/categories", json={"name": name}, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


async def create_post(client: AsyncClient, token: str, category_id: int, headline: str = "Hello") -> int:
    response = await client.post(
        f"/categories/{category_id}/posts",
        json={"headline": headline, "text": "body"},
        headers=auth(token),
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


@pytest_asyncio.fixture
async def alice(client: AsyncClient) -> dict:
    return await register(client, "alice")


@pytest_asyncio.fixture
async def bob(client: AsyncClient) -> dict:
    return await register(client, "bob")
