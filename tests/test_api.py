"""
Microblog Backend: API Endpoint Tests
=====================================

What:  Tests the HTTP contract of every route.
How:   Uses the test_client fixture (HTTPX AsyncClient + ASGITransport)
       against a fresh in-memory database per test.

What we test:
    ✅ Register/login status codes and bodies
    ✅ Message CRUD, including empty-body 200 on missing ids
    ✅ Rule violations surface as 400 with a JSON error body
    ✅ Non-numeric ids and malformed JSON are answered with 400
    ✅ Health check and request id header
"""

import pytest


async def register(client, username="alice", password="pass1"):
    return await client.post("/register", json={"username": username, "password": password})


async def post_message(client, posted_by=1, text="hello", epoch=1669947792):
    return await client.post(
        "/messages",
        json={"posted_by": posted_by, "message_text": text, "time_posted_epoch": epoch},
    )


class TestAccountEndpoints:

    @pytest.mark.asyncio
    async def test_register_success(self, test_client):
        response = await register(test_client)

        assert response.status_code == 200
        assert response.json() == {"account_id": 1, "username": "alice", "password": "pass1"}

    @pytest.mark.asyncio
    async def test_register_duplicate_username(self, test_client):
        await register(test_client)

        response = await register(test_client, password="other")

        assert response.status_code == 400
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"username": "", "password": "pass1"},
            {"username": "alice", "password": "abc"},
            {"username": "alice"},
        ],
    )
    async def test_register_invalid_credentials(self, test_client, body):
        response = await test_client.post("/register", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_login_success(self, test_client):
        await register(test_client)

        response = await test_client.post("/login", json={"username": "alice", "password": "pass1"})

        assert response.status_code == 200
        assert response.json()["account_id"] == 1

    @pytest.mark.asyncio
    async def test_login_failures_are_indistinguishable(self, test_client):
        await register(test_client)

        wrong_password = await test_client.post(
            "/login", json={"username": "alice", "password": "nope"}
        )
        unknown_user = await test_client.post(
            "/login", json={"username": "mallory", "password": "pass1"}
        )

        assert wrong_password.status_code == 401
        assert unknown_user.status_code == 401
        assert wrong_password.json()["message"] == unknown_user.json()["message"]

    @pytest.mark.asyncio
    async def test_malformed_json_is_bad_request(self, test_client):
        response = await test_client.post(
            "/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400


class TestMessageEndpoints:

    @pytest.mark.asyncio
    async def test_message_lifecycle(self, test_client):
        """Register, post, read, edit and delete a message end to end."""
        await register(test_client)

        created = await post_message(test_client)
        assert created.status_code == 200
        message = created.json()
        assert message == {
            "message_id": 1,
            "posted_by": 1,
            "message_text": "hello",
            "time_posted_epoch": 1669947792,
        }

        fetched = await test_client.get("/messages/1")
        assert fetched.status_code == 200
        assert fetched.json() == message

        patched = await test_client.patch("/messages/1", json={"message_text": "hello edited"})
        assert patched.status_code == 200
        assert patched.json()["message_text"] == "hello edited"
        assert patched.json()["time_posted_epoch"] == 1669947792

        deleted = await test_client.delete("/messages/1")
        assert deleted.status_code == 200
        assert deleted.json()["message_text"] == "hello edited"

        deleted_again = await test_client.delete("/messages/1")
        assert deleted_again.status_code == 200
        assert deleted_again.content == b""

        all_messages = await test_client.get("/messages")
        assert all_messages.json() == []

    @pytest.mark.asyncio
    async def test_deleted_message_id_is_not_reissued(self, test_client):
        """A PATCH or DELETE aimed at a deleted id must never hit a newer message."""
        await register(test_client)
        first = (await post_message(test_client, text="first")).json()
        await test_client.delete(f"/messages/{first['message_id']}")

        second = (await post_message(test_client, text="second")).json()
        stale_patch = await test_client.patch(
            f"/messages/{first['message_id']}", json={"message_text": "overwrite"}
        )

        assert second["message_id"] != first["message_id"]
        assert stale_patch.status_code == 400
        fetched = await test_client.get(f"/messages/{second['message_id']}")
        assert fetched.json()["message_text"] == "second"

    @pytest.mark.asyncio
    async def test_post_message_unknown_author(self, test_client):
        response = await post_message(test_client, posted_by=99)

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "x" * 255])
    async def test_post_message_invalid_text(self, test_client, text):
        await register(test_client)

        response = await post_message(test_client, text=text)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_post_message_max_length(self, test_client):
        await register(test_client)

        response = await post_message(test_client, text="x" * 254)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_get_missing_message_returns_empty_body(self, test_client):
        response = await test_client.get("/messages/42")

        assert response.status_code == 200
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_bad_request(self, test_client):
        response = await test_client.get("/messages/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_patch_missing_message(self, test_client):
        response = await test_client.patch("/messages/42", json={"message_text": "hi"})

        assert response.status_code == 400
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_patch_blank_text_leaves_message_unchanged(self, test_client):
        await register(test_client)
        await post_message(test_client)

        response = await test_client.patch("/messages/1", json={"message_text": ""})

        assert response.status_code == 400
        fetched = await test_client.get("/messages/1")
        assert fetched.json()["message_text"] == "hello"

    @pytest.mark.asyncio
    async def test_list_messages_and_by_account(self, test_client):
        await register(test_client, "alice", "pass1")
        await register(test_client, "bob", "pass2")
        await post_message(test_client, posted_by=1, text="a1")
        await post_message(test_client, posted_by=2, text="b1")
        await post_message(test_client, posted_by=1, text="a2")

        everything = await test_client.get("/messages")
        alice = await test_client.get("/accounts/1/messages")
        nobody = await test_client.get("/accounts/99/messages")

        assert [m["message_text"] for m in everything.json()] == ["a1", "b1", "a2"]
        assert [m["message_text"] for m in alice.json()] == ["a1", "a2"]
        assert nobody.status_code == 200
        assert nobody.json() == []


class TestOperationalEndpoints:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/messages", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
