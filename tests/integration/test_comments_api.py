"""Integration tests: comments and replies."""

import pytest
from httpx import AsyncClient

from tests.conftest import auth, create_category, create_post


async def _comment(client: AsyncClient, token: str, post_id: int, text: str = "nice") -> dict:
    response = await client.post(f"/posts/{post_id}/comments", json={"text": text}, headers=auth(token))
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def post_setup():
    async def _setup(client: AsyncClient, token: str) -> tuple[int, int]:
        category_id = await create_category(client, token)
        return category_id, await create_post(client, token, category_id)

    return _setup


class TestCommentsAPI:
    @pytest.mark.asyncio
    async def test_comment_carries_owner_details(self, client: AsyncClient, alice: dict, bob: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        comment = await _comment(client, bob["token"], post_id)
        assert comment["owner_id"] == bob["user_id"]
        assert comment["owner_username"] == "bob"
        assert comment["parent_comment_id"] is None
        assert comment["total_reaction"] == 0

    @pytest.mark.asyncio
    async def test_text_required(self, client: AsyncClient, alice: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        response = await client.post(f"/posts/{post_id}/comments", json={"text": "  "}, headers=auth(alice["token"]))
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "text is required"

    @pytest.mark.asyncio
    async def test_comment_on_missing_post(self, client: AsyncClient, alice: dict):
        response = await client.post("/posts/999/comments", json={"text": "hi"}, headers=auth(alice["token"]))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_reply_inherits_post(self, client: AsyncClient, alice: dict, bob: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        parent = await _comment(client, alice["token"], post_id)

        response = await client.post(
            f"/comments/{parent['id']}/replies", json={"text": "agreed"}, headers=auth(bob["token"])
        )
        assert response.status_code == 201
        reply = response.json()["data"]
        assert reply["post_id"] == post_id
        assert reply["parent_comment_id"] == parent["id"]

        replies = await client.get(f"/comments/{parent['id']}/replies", headers=auth(alice["token"]))
        assert [r["id"] for r in replies.json()["data"]] == [reply["id"]]

        top_level = await client.get(f"/posts/{post_id}/comments", headers=auth(alice["token"]))
        assert [c["id"] for c in top_level.json()["data"]] == [parent["id"]]

    @pytest.mark.asyncio
    async def test_owner_update(self, client: AsyncClient, alice: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        comment = await _comment(client, alice["token"], post_id)

        response = await client.put(
            f"/comments/{comment['id']}", json={"text": "edited text"}, headers=auth(alice["token"])
        )
        assert response.status_code == 200
        assert response.json()["data"]["text"] == "edited text"
        assert response.json()["data"]["edited"] is True

    @pytest.mark.asyncio
    async def test_non_owner_update_forbidden(self, client: AsyncClient, alice: dict, bob: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        comment = await _comment(client, alice["token"], post_id, "original")

        response = await client.put(f"/comments/{comment['id']}", json={"text": "x"}, headers=auth(bob["token"]))
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "you cannot update this comment"

    @pytest.mark.asyncio
    async def test_non_owner_delete_forbidden_and_unchanged(
        self, client: AsyncClient, alice: dict, bob: dict, post_setup
    ):
        _, post_id = await post_setup(client, alice["token"])
        comment = await _comment(client, alice["token"], post_id, "keep me")

        response = await client.delete(f"/comments/{comment['id']}", headers=auth(bob["token"]))
        assert response.status_code == 403

        after = await client.get(f"/comments/{comment['id']}", headers=auth(alice["token"]))
        assert after.status_code == 200
        assert after.json()["data"]["text"] == "keep me"

    @pytest.mark.asyncio
    async def test_delete_keeps_replies(self, client: AsyncClient, alice: dict, bob: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        parent = await _comment(client, alice["token"], post_id)
        reply = (
            await client.post(f"/comments/{parent['id']}/replies", json={"text": "r"}, headers=auth(bob["token"]))
        ).json()["data"]

        response = await client.delete(f"/comments/{parent['id']}", headers=auth(alice["token"]))
        assert response.status_code == 200

        orphan = await client.get(f"/comments/{reply['id']}", headers=auth(bob["token"]))
        assert orphan.status_code == 200
        assert orphan.json()["data"]["parent_comment_id"] is None

    @pytest.mark.asyncio
    async def test_deleting_post_removes_comments(self, client: AsyncClient, alice: dict, post_setup):
        _, post_id = await post_setup(client, alice["token"])
        comment = await _comment(client, alice["token"], post_id)

        await client.delete(f"/posts/{post_id}", headers=auth(alice["token"]))
        response = await client.get(f"/comments/{comment['id']}", headers=auth(alice["token"]))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_own_comments(self, client: AsyncClient, alice: dict, bob: dict, post_setup):
        category_id, post_id = await post_setup(client, alice["token"])
        first = await _comment(client, bob["token"], post_id, "one")
        second = await _comment(client, bob["token"], post_id, "two")
        await _comment(client, alice["token"], post_id, "not bob")

        response = await client.get("/user/comments", headers=auth(bob["token"]))
        assert [c["id"] for c in response.json()["data"]] == [second["id"], first["id"]]

        in_category = await client.get(f"/categories/{category_id}/comments/user", headers=auth(bob["token"]))
        assert [c["id"] for c in in_category.json()["data"]] == [second["id"], first["id"]]

        other = await create_category(client, bob["token"], "other")
        empty = await client.get(f"/user/comments/category/{other}", headers=auth(bob["token"]))
        assert empty.json()["data"] == []
