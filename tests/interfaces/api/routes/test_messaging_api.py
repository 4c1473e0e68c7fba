"""End-to-end tests for the messaging endpoints."""

from __future__ import annotations

import time

import pytest

pytest.importorskip("fastapi")
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from anonyma.domain.entities import new_broadcast_event
from anonyma.interfaces.api.dependencies import get_event_publisher, get_notification_hub
from main import create_app

DEFAULT_PASSWORD = "secret123"


@pytest.fixture()
def client(hub, publisher):
    app = create_app()
    app.dependency_overrides[get_event_publisher] = lambda: publisher
    app.dependency_overrides[get_notification_hub] = lambda: hub
    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, username: str) -> int:
    response = client.post(
        "/auth/register", json={"username": username, "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 201
    return response.json()["id"]


def _login(client: TestClient, username: str) -> dict[str, str]:
    response = client.post(
        "/auth/token",
        data={"username": username, "password": DEFAULT_PASSWORD},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _id_fields(payload) -> set[str]:
    """Collect every ``*_id`` key found anywhere in a JSON payload."""

    if isinstance(payload, list):
        return set().union(*(_id_fields(item) for item in payload))
    if isinstance(payload, dict):
        found = {key for key in payload if key.endswith("_id")}
        for value in payload.values():
            found |= _id_fields(value)
        return found
    return set()


def test_login_returns_bearer_token_and_identity(client: TestClient) -> None:
    user_id = _register(client, "alice")

    response = client.post(
        "/auth/token",
        data={"username": "alice", "password": DEFAULT_PASSWORD},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["token_type"] == "bearer"
    assert payload["user_id"] == user_id

    me = client.get("/api/me", headers={"Authorization": f"Bearer {payload['access_token']}"})
    assert me.json() == {"user_id": user_id, "username": "alice"}


def test_wrong_password_and_duplicate_username_are_rejected(client: TestClient) -> None:
    _register(client, "alice")

    login = client.post(
        "/auth/token",
        data={"username": "alice", "password": "nope-nope"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    duplicate = client.post(
        "/auth/register", json={"username": "alice", "password": DEFAULT_PASSWORD}
    )

    assert login.status_code == 401
    assert login.json()["detail"] == "Credenciales incorrectas"
    assert duplicate.status_code == 400


def test_anonymous_message_cannot_be_answered(client: TestClient) -> None:
    bob_id = _register(client, "bob")
    bob_headers = _login(client, "bob")

    sent = client.post("/api/messages", json={"recipient_id": bob_id, "content": "hola"})
    assert sent.status_code == 201
    thread_id = sent.json()["thread_id"]

    reply = client.post(
        f"/api/conversations/{thread_id}/reply",
        json={"content": "¿quién eres?"},
        headers=bob_headers,
    )
    assert reply.status_code == 400

    conversations = client.get("/api/conversations", headers=bob_headers).json()
    assert len(conversations) == 1
    assert "counterpart_username" not in conversations[0]
    assert "sender_id" not in conversations[0]["latest"]


def test_authenticated_message_round_trip_with_live_event(client: TestClient, hub) -> None:
    alice_id = _register(client, "alice")
    bob_id = _register(client, "bob")
    alice_headers = _login(client, "alice")
    bob_headers = _login(client, "bob")
    alice_receiver = hub.subscribe(alice_id)

    sent = client.post(
        "/api/messages",
        json={"recipient_id": bob_id, "content": "hola bob"},
        headers=alice_headers,
    )
    thread_id = sent.json()["thread_id"]

    reply = client.post(
        f"/api/conversations/{thread_id}/reply",
        json={"content": "hola alice"},
        headers=bob_headers,
    )
    assert reply.status_code == 201
    assert reply.json()["is_mine"] is True

    event = alice_receiver.try_recv()
    assert event.event_type == "new_message"
    assert event.payload["thread_id"] == thread_id
    assert event.payload["content"] == "hola alice"

    thread = client.get(f"/api/conversations/{thread_id}", headers=alice_headers)
    assert thread.status_code == 200
    messages = thread.json()
    assert [item["content"] for item in messages] == ["hola bob", "hola alice"]
    assert [item["is_mine"] for item in messages] == [True, False]
    assert messages[1]["is_read"] is False
    assert all("sender_id" not in item for item in messages)

    again = client.get(f"/api/conversations/{thread_id}", headers=alice_headers).json()
    assert again[1]["is_read"] is True


def test_invalid_token_is_rejected_even_for_optional_auth(client: TestClient) -> None:
    bob_id = _register(client, "bob")

    response = client.post(
        "/api/messages",
        json={"recipient_id": bob_id, "content": "hola"},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciales inválidas"


def test_outsider_gets_forbidden_and_unknown_recipient_not_found(client: TestClient) -> None:
    _register(client, "alice")
    bob_id = _register(client, "bob")
    _register(client, "carol")
    carol_headers = _login(client, "carol")

    sent = client.post(
        "/api/messages", json={"recipient_id": bob_id, "content": "hola"}
    ).json()
    thread = client.get(f"/api/conversations/{sent['thread_id']}", headers=carol_headers)
    missing = client.post("/api/messages", json={"recipient_id": 999, "content": "hola"})
    blank = client.post("/api/messages", json={"recipient_id": bob_id, "content": "   "})

    assert thread.status_code == 403
    assert missing.status_code == 404
    assert blank.status_code == 400


def test_typing_status_endpoint(client: TestClient, hub) -> None:
    _register(client, "alice")
    bob_id = _register(client, "bob")
    alice_headers = _login(client, "alice")
    bob_headers = _login(client, "bob")
    bob_receiver = hub.subscribe(bob_id)

    thread_id = client.post(
        "/api/messages",
        json={"recipient_id": bob_id, "content": "hola"},
        headers=alice_headers,
    ).json()["thread_id"]

    marked = client.post(f"/api/conversations/{thread_id}/typing", headers=alice_headers)
    status = client.get(f"/api/conversations/{thread_id}/typing", headers=bob_headers)

    assert marked.status_code == 204
    assert status.json() == {"is_typing": True}
    bob_receiver.try_recv()
    assert bob_receiver.try_recv().payload["user_id"] is None


def test_broadcast_endpoints_hide_anonymous_author(client: TestClient) -> None:
    _register(client, "alice")
    alice_headers = _login(client, "alice")

    created = client.post(
        "/api/broadcasts",
        json={"content": "aviso", "is_anonymous": True},
        headers=alice_headers,
    )
    assert created.status_code == 201

    listed = client.get("/api/broadcasts", headers=alice_headers).json()
    assert listed[0]["content"] == "aviso"
    assert listed[0].get("sender_username") is None
    assert "sender_id" not in listed[0]


def test_message_payloads_never_expose_participant_ids(client: TestClient) -> None:
    _register(client, "alice")
    bob_id = _register(client, "bob")
    alice_headers = _login(client, "alice")
    bob_headers = _login(client, "bob")

    thread_id = client.post(
        "/api/messages",
        json={"recipient_id": bob_id, "content": "who is this?"},
        headers=alice_headers,
    ).json()["thread_id"]
    client.post(
        f"/api/conversations/{thread_id}/reply",
        json={"content": "who are you?"},
        headers=bob_headers,
    )
    client.post(
        f"/api/conversations/{thread_id}/reply",
        json={"content": "who knows"},
        headers=alice_headers,
    )

    responses = [
        client.get(f"/api/conversations/{thread_id}", headers=bob_headers),
        client.get("/api/messages/search", params={"q": "who"}, headers=bob_headers),
        client.get("/api/messages/inbox", headers=bob_headers),
        client.get("/api/conversations", headers=bob_headers),
    ]

    assert all(response.status_code == 200 for response in responses)
    assert len(responses[1].json()) == 3
    for response in responses:
        assert _id_fields(response.json()) <= {"thread_id"}


def test_websocket_forwards_events_from_the_injected_hub(client: TestClient, hub) -> None:
    bob_id = _register(client, "bob")
    token = _login(client, "bob")["Authorization"].removeprefix("Bearer ")

    with client.websocket_connect(f"/api/events/ws?token={token}") as websocket:
        deadline = time.monotonic() + 2
        while hub.receiver_count(bob_id) == 0:
            assert time.monotonic() < deadline
            time.sleep(0.01)
        hub.publish_to(bob_id, new_broadcast_event(7))

        assert websocket.receive_json() == {
            "event": "new_broadcast",
            "data": {"broadcast_id": 7},
        }


def test_websocket_rejects_missing_token(client: TestClient) -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/api/events/ws"):
            pass

    assert exc_info.value.code == 1008
