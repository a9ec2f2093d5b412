"""
Tagboard Backend - Messages and Tags Endpoint Tests
====================================================

What:  HTTP-level tests against an in-memory SQLite database.
How:   `test_client` from conftest.py; every request runs the real services,
       the real join query and the row aggregator.
"""

from unittest.mock import AsyncMock, patch

import pytest

from tagboard.exceptions import InvalidRowError


async def create_message(client, text, tags=()):
    response = await client.post("/api/messages", json={"text": text, "tags": list(tags)})
    assert response.status_code == 201, response.text
    return response.json()


class TestMessageCrud:

    @pytest.mark.asyncio
    async def test_create_and_get_message(self, test_client):
        created = await create_message(test_client, "first", ["happy", "funny", "happy"])

        assert created["text"] == "first"
        # Duplicates collapsed; tags come back ordered by name
        assert created["tags"] == ["funny", "happy"]

        response = await test_client.get(f"/api/messages/{created['id']}")
        assert response.status_code == 200
        assert response.json()["tags"] == ["funny", "happy"]

    @pytest.mark.asyncio
    async def test_list_messages_nests_tags_per_message(self, test_client):
        await create_message(test_client, "first", ["funny", "happy"])
        await create_message(test_client, "second", ["funny", "silly"])
        await create_message(test_client, "third", ["silly"])
        await create_message(test_client, "untagged")

        response = await test_client.get("/api/messages")

        assert response.status_code == 200
        body = [{"text": m["text"], "tags": m["tags"]} for m in response.json()]
        assert body == [
            {"text": "first", "tags": ["funny", "happy"]},
            {"text": "second", "tags": ["funny", "silly"]},
            {"text": "third", "tags": ["silly"]},
            {"text": "untagged", "tags": []},
        ]

    @pytest.mark.asyncio
    async def test_list_messages_filtered_by_tag_keeps_all_tags(self, test_client):
        await create_message(test_client, "first", ["funny", "happy"])
        await create_message(test_client, "second", ["silly"])

        response = await test_client.get("/api/messages", params={"tag": "happy"})

        assert [(m["text"], m["tags"]) for m in response.json()] == [
            ("first", ["funny", "happy"]),
        ]

    @pytest.mark.asyncio
    async def test_list_messages_paginates_by_message_not_row(self, test_client):
        for i in range(3):
            await create_message(test_client, f"m{i}", ["a", "b", "c"])

        first = await test_client.get("/api/messages", params={"limit": 2})
        second = await test_client.get("/api/messages", params={"limit": 2, "offset": 2})

        assert [m["text"] for m in first.json()] == ["m0", "m1"]
        assert all(m["tags"] == ["a", "b", "c"] for m in first.json())
        assert [m["text"] for m in second.json()] == ["m2"]

    @pytest.mark.asyncio
    async def test_update_message_text(self, test_client):
        created = await create_message(test_client, "draft", ["wip"])

        response = await test_client.patch(f"/api/messages/{created['id']}", json={"text": "final"})

        assert response.status_code == 200
        assert response.json()["text"] == "final"
        assert response.json()["tags"] == ["wip"]

    @pytest.mark.asyncio
    async def test_delete_message(self, test_client):
        created = await create_message(test_client, "bye", ["temp"])

        response = await test_client.delete(f"/api/messages/{created['id']}")
        assert response.status_code == 204

        missing = await test_client.get(f"/api/messages/{created['id']}")
        assert missing.status_code == 404
        # The tag survives, with no messages left
        tags = (await test_client.get("/api/tags")).json()
        assert tags == [{"id": tags[0]["id"], "name": "temp", "message_count": 0}]

    @pytest.mark.asyncio
    async def test_missing_message_returns_error_body(self, test_client):
        response = await test_client.get("/api/messages/404", headers={"X-Request-ID": "abc123"})

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "abc123"
        body = response.json()
        assert body["error"] == "not_found"
        assert body["request_id"] == "abc123"

    @pytest.mark.asyncio
    async def test_blank_text_is_rejected(self, test_client):
        response = await test_client.post("/api/messages", json={"text": ""})
        assert response.status_code == 422


class TestMessageTags:

    @pytest.mark.asyncio
    async def test_attach_tag_is_idempotent(self, test_client):
        created = await create_message(test_client, "hello")

        first = await test_client.post(f"/api/messages/{created['id']}/tags", json={"name": " funny "})
        second = await test_client.post(f"/api/messages/{created['id']}/tags", json={"name": "funny"})

        assert first.status_code == 200
        assert first.json()["tags"] == ["funny"]
        assert second.json()["tags"] == ["funny"]

    @pytest.mark.asyncio
    async def test_detach_tag(self, test_client):
        created = await create_message(test_client, "hello", ["funny", "happy"])

        response = await test_client.delete(f"/api/messages/{created['id']}/tags/funny")

        assert response.status_code == 200
        assert response.json()["tags"] == ["happy"]

    @pytest.mark.asyncio
    async def test_detach_tag_not_attached(self, test_client):
        created = await create_message(test_client, "hello", ["funny"])

        response = await test_client.delete(f"/api/messages/{created['id']}/tags/silly")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_tag_lookups_ignore_surrounding_whitespace(self, test_client):
        created = await create_message(test_client, "hello", ["funny", "happy"])

        listed = await test_client.get("/api/messages", params={"tag": " funny "})
        assert [m["id"] for m in listed.json()] == [created["id"]]

        response = await test_client.delete(f"/api/messages/{created['id']}/tags/%20funny")

        assert response.status_code == 200
        assert response.json()["tags"] == ["happy"]

    @pytest.mark.asyncio
    async def test_attach_to_missing_message(self, test_client):
        response = await test_client.post("/api/messages/9/tags", json={"name": "funny"})
        assert response.status_code == 404


class TestTags:

    @pytest.mark.asyncio
    async def test_create_and_list_tags_with_counts(self, test_client):
        await create_message(test_client, "one", ["funny"])
        await create_message(test_client, "two", ["funny", "happy"])
        created = await test_client.post("/api/tags", json={"name": "silly"})

        assert created.status_code == 201
        assert created.json()["message_count"] == 0

        response = await test_client.get("/api/tags")
        assert [(t["name"], t["message_count"]) for t in response.json()] == [
            ("funny", 2),
            ("happy", 1),
            ("silly", 0),
        ]

    @pytest.mark.asyncio
    async def test_duplicate_tag_conflicts(self, test_client):
        await test_client.post("/api/tags", json={"name": "funny"})

        response = await test_client.post("/api/tags", json={"name": "funny"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_delete_tag_unlinks_messages(self, test_client):
        created = await create_message(test_client, "hello", ["funny", "happy"])
        tags = {t["name"]: t["id"] for t in (await test_client.get("/api/tags")).json()}

        response = await test_client.delete(f"/api/tags/{tags['funny']}")

        assert response.status_code == 204
        message = (await test_client.get(f"/api/messages/{created['id']}")).json()
        assert message["tags"] == ["happy"]

    @pytest.mark.asyncio
    async def test_delete_missing_tag(self, test_client):
        response = await test_client.delete("/api/tags/123")
        assert response.status_code == 404


class TestAggregationFailure:

    @pytest.mark.asyncio
    async def test_invalid_row_returns_generic_500(self, test_client):
        failing = AsyncMock(side_effect=InvalidRowError(message="Row 3 has an unusable 'id' value"))
        with patch("tagboard.routes.messages.message_service.list_messages", failing):
            response = await test_client.get("/api/messages")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "unusable" not in body["message"]
