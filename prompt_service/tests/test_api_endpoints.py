"""
Tests for the prompt API endpoints.

Requests go through the real app, an in-memory SQLite store and a listing
cache backed by a fake Redis client.
"""

from unittest.mock import AsyncMock

import pytest

from prompt_service.api.endpoints import prompts as prompt_endpoints
from prompt_service.tests.stubs.fakes import prompt_payload


async def _create(client, **overrides):
    response = await client.post("/api/prompts", json=prompt_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


class TestListPrompts:
    """Test cases for GET /api/prompts."""

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_array(self, client):
        response = await client.get("/api/prompts")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, client):
        first = await _create(client, title="First")
        second = await _create(client, title="Second")

        response = await client.get("/api/prompts")

        assert [p["id"] for p in response.json()] == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_wire_format(self, client):
        created = await _create(client, tags=["trending", "video"])

        listed = (await client.get("/api/prompts")).json()[0]

        assert listed["id"] == created["id"]
        assert listed["tags"] == ["trending", "video"]
        assert listed["isTrending"] is True
        assert listed["votes"] == 0
        assert "createdAt" in listed

    @pytest.mark.asyncio
    async def test_second_unfiltered_request_is_a_cache_hit(self, client, fake_redis):
        await _create(client)

        first = await client.get("/api/prompts")
        second = await client.get("/api/prompts")

        assert first.content == second.content
        assert fake_redis.ops("set") == 1
        assert fake_redis.store["prompts"] == first.content

    @pytest.mark.asyncio
    async def test_cache_hit_skips_store(self, client, fake_redis, app):
        await _create(client)
        await client.get("/api/prompts")

        store = AsyncMock()
        app.dependency_overrides[prompt_endpoints.get_prompt_store] = lambda: store
        response = await client.get("/api/prompts")

        assert response.status_code == 200
        assert len(response.json()) == 1
        store.list.assert_not_called()

    @pytest.mark.asyncio
    async def test_filtered_requests_bypass_cache(self, client, fake_redis):
        await _create(client)

        await client.get("/api/prompts", params={"search": "youtube"})
        await client.get("/api/prompts", params={"tags": "scripting"})

        assert fake_redis.ops("get") == 0
        assert fake_redis.ops("set") == 0

    @pytest.mark.asyncio
    async def test_blank_search_counts_as_unfiltered(self, client, fake_redis):
        await client.get("/api/prompts", params={"search": "   ", "tags": ","})

        assert fake_redis.ops("set") == 1

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, client):
        await _create(client, title="Cinematic Drone Shot")
        await _create(client, title="Other", description="Something else", tags=["misc"])

        response = await client.get("/api/prompts", params={"search": "DRONE"})

        assert [p["title"] for p in response.json()] == ["Cinematic Drone Shot"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("term", ["über", "Über", "ÜBER", "ärger"])
    async def test_search_folds_non_ascii_case(self, client, term):
        await _create(client, title="Über Ärger Prompt")
        await _create(client, title="Plain", description="Nothing special", tags=["misc"])

        response = await client.get("/api/prompts", params={"search": term})

        assert [p["title"] for p in response.json()] == ["Über Ärger Prompt"]

    @pytest.mark.asyncio
    async def test_search_matches_tags(self, client):
        await _create(client, title="Tagged", tags=["midjourney"])
        await _create(client, title="Untagged", tags=["misc"])

        response = await client.get("/api/prompts", params={"search": "journey"})

        assert [p["title"] for p in response.json()] == ["Tagged"]

    @pytest.mark.asyncio
    async def test_tags_use_or_semantics(self, client):
        await _create(client, title="A", tags=["a"])
        await _create(client, title="B", tags=["b"])
        await _create(client, title="C", tags=["c"])

        response = await client.get("/api/prompts", params={"tags": "a,b"})

        assert [p["title"] for p in response.json()] == ["B", "A"]

    @pytest.mark.asyncio
    async def test_tag_match_is_exact(self, client):
        await _create(client, title="Scripting", tags=["scripting"])

        response = await client.get("/api/prompts", params={"tags": "script"})

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_search_and_tags_combined(self, client):
        await _create(client, title="Video One", tags=["video"])
        await _create(client, title="Video Two", tags=["other"])

        response = await client.get("/api/prompts", params={"search": "video", "tags": "video"})

        assert [p["title"] for p in response.json()] == ["Video One"]

    @pytest.mark.asyncio
    async def test_store_failure_returns_generic_500(self, client, app):
        store = AsyncMock()
        store.list.side_effect = RuntimeError("disk I/O error at /var/db")
        app.dependency_overrides[prompt_endpoints.get_prompt_store] = lambda: store

        response = await client.get("/api/prompts", params={"search": "x"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server error"}


class TestGetPrompt:
    """Test cases for GET /api/prompts/{id}."""

    @pytest.mark.asyncio
    async def test_tags_round_trip(self, client):
        created = await _create(client, tags=["one", "two", "three"])

        response = await client.get(f"/api/prompts/{created['id']}")

        assert response.status_code == 200
        assert response.json()["tags"] == ["one", "two", "three"]

    @pytest.mark.asyncio
    async def test_unknown_id(self, client):
        response = await client.get("/api/prompts/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Prompt not found"}


class TestCreatePrompt:
    """Test cases for POST /api/prompts."""

    @pytest.mark.asyncio
    async def test_create_assigns_defaults(self, client):
        payload = prompt_payload(author="")
        del payload["category"]

        response = await client.post("/api/prompts", json=payload)

        assert response.status_code == 201
        body = response.json()
        assert body["votes"] == 0
        assert body["category"] == "text"
        assert body["author"] == "Anonymous"
        assert body["id"]

    @pytest.mark.asyncio
    async def test_create_invalidates_cached_listing(self, client, fake_redis):
        await client.get("/api/prompts")
        assert "prompts" in fake_redis.store

        created = await _create(client)

        assert "prompts" not in fake_redis.store
        listed = (await client.get("/api/prompts")).json()
        assert [p["id"] for p in listed] == [created["id"]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"title": "  "}, "Title is required"),
            ({"description": ""}, "Description is required"),
            ({"content": ""}, "Content is required"),
            ({"tags": []}, "At least one tag is required"),
            ({"tags": ["a,b"]}, "Tags cannot contain commas"),
        ],
    )
    async def test_validation_errors(self, client, fake_redis, overrides, message):
        await client.get("/api/prompts")

        response = await client.post("/api/prompts", json=prompt_payload(**overrides))

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert "prompts" in fake_redis.store
        assert (await client.get("/api/prompts")).json() == []

    @pytest.mark.asyncio
    async def test_unknown_category(self, client):
        response = await client.post("/api/prompts", json=prompt_payload(category="audio"))

        assert response.status_code == 400
        assert response.json()["error"].startswith("Category must be one of")

    @pytest.mark.asyncio
    async def test_malformed_body(self, client):
        response = await client.post(
            "/api/prompts",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestVotePrompt:
    """Test cases for PATCH /api/prompts/{id}/vote."""

    @pytest.mark.asyncio
    async def test_upvote_and_downvote(self, client):
        created = await _create(client)

        up = await client.patch(f"/api/prompts/{created['id']}/vote", json={"delta": 1})
        down = await client.patch(f"/api/prompts/{created['id']}/vote", json={"delta": -1})

        assert up.status_code == 200
        assert up.json()["votes"] == 1
        assert down.json()["votes"] == 0

    @pytest.mark.asyncio
    async def test_votes_may_go_negative(self, client):
        created = await _create(client)

        response = await client.patch(f"/api/prompts/{created['id']}/vote", json={"delta": -1})

        assert response.json()["votes"] == -1

    @pytest.mark.asyncio
    async def test_server_does_not_deduplicate_votes(self, client):
        created = await _create(client)
        url = f"/api/prompts/{created['id']}/vote"

        await client.patch(url, json={"delta": 1})
        response = await client.patch(url, json={"delta": 1})

        assert response.json()["votes"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("delta", [5, 0, "1", None, True])
    async def test_invalid_delta_leaves_count_unchanged(self, client, delta):
        created = await _create(client)

        response = await client.patch(f"/api/prompts/{created['id']}/vote", json={"delta": delta})

        assert response.status_code == 400
        assert response.json() == {"error": "delta must be 1 or -1"}
        stored = await client.get(f"/api/prompts/{created['id']}")
        assert stored.json()["votes"] == 0

    @pytest.mark.asyncio
    async def test_missing_body(self, client):
        created = await _create(client)

        response = await client.patch(f"/api/prompts/{created['id']}/vote")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_id(self, client):
        response = await client.patch("/api/prompts/missing/vote", json={"delta": 1})

        assert response.status_code == 404
        assert response.json() == {"error": "Prompt not found"}

    @pytest.mark.asyncio
    async def test_vote_invalidates_cached_listing(self, client, fake_redis):
        created = await _create(client)
        await client.get("/api/prompts")

        await client.patch(f"/api/prompts/{created['id']}/vote", json={"delta": 1})

        assert "prompts" not in fake_redis.store
        listed = (await client.get("/api/prompts")).json()
        assert listed[0]["votes"] == 1


class TestCacheDegradation:
    """The listing keeps working when Redis fails."""

    @pytest.mark.asyncio
    async def test_redis_outage_falls_back_to_memory_tier(self, client, fake_redis):
        await _create(client)
        fake_redis.fail = True

        first = await client.get("/api/prompts")
        second = await client.get("/api/prompts")

        assert first.status_code == 200
        assert first.content == second.content
        assert len(first.json()) == 1

    @pytest.mark.asyncio
    async def test_mutation_succeeds_while_redis_down(self, client, fake_redis):
        fake_redis.fail = True

        response = await client.post("/api/prompts", json=prompt_payload())

        assert response.status_code == 201


class TestHealth:
    """Test cases for GET /api/health."""

    @pytest.mark.asyncio
    async def test_reports_redis_available(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "redis": True}

    @pytest.mark.asyncio
    async def test_reports_redis_down(self, client, fake_redis):
        fake_redis.fail = True
        await client.get("/api/prompts")

        response = await client.get("/api/health")

        assert response.json() == {"status": "ok", "redis": False}
