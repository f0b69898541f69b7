"""Integration tests: category subscriptions."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum.auth.service import register_user
from forum.categories.service import create_category as create_category_row
from forum.categories.service import list_user_memberships, subscribe, unsubscribe
from forum.db.models import Membership
from forum.errors import NotFoundError
from tests.conftest import auth, create_category


class TestMembershipService:
    @pytest.mark.asyncio
    async def test_subscribe_twice_keeps_one_row(self, db_session: AsyncSession):
        user = await register_user(db_session, "member", "member@example.com", "SecureP@ss1")
        category = await create_category_row(db_session, "general")

        first = await subscribe(db_session, user.id, "general")
        second = await subscribe(db_session, user.id, "general")
        await db_session.commit()

        assert first.id == second.id
        result = await db_session.execute(
            select(func.count())
            .select_from(Membership)
            .where(Membership.user_id == user.id, Membership.category_id == category.id)
        )
        assert result.scalar_one() == 1

    @pytest.mark.asyncio
    async def test_unknown_category(self, db_session: AsyncSession):
        user = await register_user(db_session, "member", "member@example.com", "SecureP@ss1")
        with pytest.raises(NotFoundError):
            await subscribe(db_session, user.id, "nope")

    @pytest.mark.asyncio
    async def test_unsubscribe(self, db_session: AsyncSession):
        user = await register_user(db_session, "member", "member@example.com", "SecureP@ss1")
        category = await create_category_row(db_session, "general")
        await subscribe(db_session, user.id, "general")

        await unsubscribe(db_session, user.id, category.id)
        assert await list_user_memberships(db_session, user.id) == []
        with pytest.raises(NotFoundError):
            await unsubscribe(db_session, user.id, category.id)


class TestMembershipAPI:
    @pytest.mark.asyncio
    async def test_subscribe_list_unsubscribe(self, client: AsyncClient, alice: dict):
        headers = auth(alice["token"])
        general = await create_category(client, alice["token"], "general")
        news = await create_category(client, alice["token"], "news")

        first = await client.post("/user/subscribe", json={"category": "general"}, headers=headers)
        assert first.status_code == 200
        again = await client.post("/user/subscribe", json={"category": "general"}, headers=headers)
        assert again.status_code == 200
        assert again.json()["data"]["membership_id"] == first.json()["data"]["membership_id"]
        await client.post("/user/subscribe", json={"category": "news"}, headers=headers)

        listing = await client.get("/user/categories", headers=headers)
        assert [m["category_id"] for m in listing.json()["data"]] == [news, general]
        assert listing.json()["data"][0]["category"] == "news"

        response = await client.post("/user/unsubscribe", json={"category_id": general}, headers=headers)
        assert response.status_code == 200
        listing = await client.get("/user/categories", headers=headers)
        assert [m["category_id"] for m in listing.json()["data"]] == [news]

    @pytest.mark.asyncio
    async def test_unsubscribe_without_membership(self, client: AsyncClient, alice: dict):
        category_id = await create_category(client, alice["token"])
        response = await client.post(
            "/user/unsubscribe", json={"category_id": category_id}, headers=auth(alice["token"])
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_subscribe_unknown_category(self, client: AsyncClient, alice: dict):
        response = await client.post("/user/subscribe", json={"category": "missing"}, headers=auth(alice["token"]))
        assert response.status_code == 404
