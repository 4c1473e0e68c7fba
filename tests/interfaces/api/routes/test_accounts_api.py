"""End-to-end tests for profile, account deletion and preference endpoints."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from anonyma.interfaces.api.dependencies import get_event_publisher
from main import create_app

DEFAULT_PASSWORD = "secret123"


@pytest.fixture()
def client(publisher):
    app = create_app()
    app.dependency_overrides[get_event_publisher] = lambda: publisher
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


def test_profile_update_changes_only_sent_fields(client: TestClient) -> None:
    alice_id = _register(client, "alice")
    _register(client, "bob")
    headers = _login(client, "alice")

    response = client.post(
        "/api/me",
        json={"bio": "hola", "avatar_url": "https://example.com/alice.png"},
        headers=headers,
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["id"] == alice_id
    assert payload["username"] == "alice"
    assert payload["bio"] == "hola"
    assert payload["avatar_url"] == "https://example.com/alice.png"

    renamed = client.post("/api/me", json={"username": "alicia"}, headers=headers)
    assert renamed.json()["bio"] == "hola"
    # The existing token keeps working and reflects the new name.
    assert client.get("/api/me", headers=headers).json() == {
        "user_id": alice_id,
        "username": "alicia",
    }

    taken = client.post("/api/me", json={"username": "bob"}, headers=headers)
    assert taken.status_code == 400
    assert taken.json()["detail"] == "El nombre de usuario ya está registrado"

    bad_avatar = client.post("/api/me", json={"avatar_url": "ftp://x"}, headers=headers)
    assert bad_avatar.status_code == 400


def test_deleting_account_revokes_token_and_anonymizes_sent_messages(
    client: TestClient,
) -> None:
    _register(client, "alice")
    bob_id = _register(client, "bob")
    alice_headers = _login(client, "alice")
    bob_headers = _login(client, "bob")
    sent = client.post(
        "/api/messages",
        json={"recipient_id": bob_id, "content": "hola bob"},
        headers=alice_headers,
    )
    thread_id = sent.json()["thread_id"]

    deleted = client.delete("/api/me", headers=alice_headers)
    assert deleted.status_code == 204

    assert client.get("/api/me", headers=alice_headers).status_code == 401
    login = client.post(
        "/auth/token",
        data={"username": "alice", "password": DEFAULT_PASSWORD},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert login.status_code == 401

    thread = client.get(f"/api/conversations/{thread_id}", headers=bob_headers)
    assert [message["content"] for message in thread.json()] == ["hola bob"]
    reply = client.post(
        f"/api/conversations/{thread_id}/reply",
        json={"content": "¿sigues ahí?"},
        headers=bob_headers,
    )
    assert reply.status_code == 400
    assert client.get("/api/users", headers=bob_headers).json() == []


def test_preferences_default_then_merge_updates(client: TestClient) -> None:
    _register(client, "alice")
    headers = _login(client, "alice")

    defaults = client.get("/api/preferences", headers=headers)
    assert defaults.status_code == 200
    assert defaults.json() == {
        "theme": "dark",
        "notification_sound": True,
        "browser_notifications": True,
        "show_read_receipts": True,
        "show_typing_indicators": True,
        "updated_at": None,
    }

    saved = client.post(
        "/api/preferences", json={"theme": "light", "show_read_receipts": False}, headers=headers
    )
    assert saved.status_code == 200
    assert saved.json()["theme"] == "light"

    merged = client.post(
        "/api/preferences", json={"notification_sound": False}, headers=headers
    ).json()
    assert merged["theme"] == "light"
    assert merged["show_read_receipts"] is False
    assert merged["notification_sound"] is False
    assert merged["browser_notifications"] is True

    unsupported = client.post("/api/preferences", json={"theme": "neon"}, headers=headers)
    assert unsupported.status_code == 422
    assert client.get("/api/preferences").status_code == 401
