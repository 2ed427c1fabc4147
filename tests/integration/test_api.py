"""Integration tests for the REST API over an in-memory unit of work."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from social_chat.app import create_app
from tests.conftest import FakeUoW, make_message, uow_factory_for


@pytest.fixture
def uow():
    return FakeUoW()


@pytest.fixture
def client(uow):
    app = create_app(uow_factory=uow_factory_for(uow))
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def _create(client, username: str) -> dict:
    resp = client.post(
        "/api/v1/users",
        json={"username": username, "email": f"{username}@example.com", "fullname": username.title()},
    )
    assert resp.status_code == 201
    return resp.json()


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    resp = client.get("/healthz", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_create_and_get_user(client):
    created = _create(client, "alice")

    resp = client.get(f"/api/v1/users/{created['id']}")

    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"
    assert resp.json()["friends"] == []


def test_create_duplicate_user_conflicts(client):
    _create(client, "alice")

    resp = client.post(
        "/api/v1/users",
        json={"username": "alice", "email": "new@example.com", "fullname": "A"},
    )

    assert resp.status_code == 409


def test_create_user_invalid_email(client):
    resp = client.post(
        "/api/v1/users",
        json={"username": "alice", "email": "nope", "fullname": "A"},
    )
    assert resp.status_code == 422


def test_get_unknown_user(client):
    resp = client.get("/api/v1/users/ghost")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found"


def test_list_users(client):
    _create(client, "bob")
    _create(client, "alice")

    resp = client.get("/api/v1/users")

    assert [u["username"] for u in resp.json()] == ["alice", "bob"]


def test_update_profile(client):
    created = _create(client, "alice")

    resp = client.patch(f"/api/v1/users/{created['id']}", json={"avatar": "a.png"})

    assert resp.status_code == 200
    assert resp.json()["avatar"] == "a.png"
    assert resp.json()["fullname"] == "Alice"


def test_friend_request_flow(client):
    alice = _create(client, "alice")
    bob = _create(client, "bob")

    resp = client.post("/api/v1/friend-requests", json={"from": alice["id"], "to": bob["id"]})
    assert resp.status_code == 201
    request_id = resp.json()["id"]

    pending = client.get(f"/api/v1/users/{bob['id']}/friend-requests").json()
    assert [r["id"] for r in pending] == [request_id]

    resp = client.post(f"/api/v1/friend-requests/{request_id}/accept")
    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"

    assert client.get(f"/api/v1/users/{alice['id']}").json()["friends"] == [bob["id"]]
    assert client.post(f"/api/v1/friend-requests/{request_id}/accept").status_code == 409


def test_self_friend_request_rejected(client):
    alice = _create(client, "alice")

    resp = client.post("/api/v1/friend-requests", json={"from": alice["id"], "to": alice["id"]})

    assert resp.status_code == 422


def test_accept_unknown_request(client):
    resp = client.post(f"/api/v1/friend-requests/{uuid.uuid4()}/accept")
    assert resp.status_code == 404


def test_history_pagination(client, uow, clock):
    for i in range(3):
        uow.messages._messages.append(
            make_message(body=f"m{i}", created_at=clock.advance()),
        )

    first = client.get("/api/v1/messages/bob/alice", params={"limit": 2}).json()
    second = client.get(
        "/api/v1/messages/bob/alice",
        params={"limit": 2, "cursor": first["next_cursor"]},
    ).json()

    assert [m["body"] for m in first["items"]] == ["m0", "m1"]
    assert first["next_cursor"] is not None
    assert [m["body"] for m in second["items"]] == ["m2"]
    assert second["next_cursor"] is None


def test_history_bad_cursor(client):
    resp = client.get("/api/v1/messages/alice/bob", params={"cursor": "garbage"})
    assert resp.status_code == 422


def test_presence_empty(client):
    assert client.get("/api/v1/presence").json() == {"online": []}
