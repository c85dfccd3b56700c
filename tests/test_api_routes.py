"""
tests/test_api_routes.py — FastAPI Route Integration Tests
============================================================

The process-wide store and config are swapped for per-test instances via
``app.dependency_overrides``, so no database is touched.
"""

from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from toastx.api.deps import create_access_token, get_config, get_store
from toastx.config import ToastXConfig
from toastx.engine.timeutil import utcnow
from toastx.store.holder import StateStore

QUICK_TOAST = {
    "type": "QUICK_TOAST",
    "recipient_ids": ["bob"],
    "value": "BE_ALL_IN",
    "message": "Thanks for pairing on the flaky test!",
}


@pytest.fixture
def store(state):
    # Routes run on the real clock; fresh join dates keep anniversary badges out
    now = utcnow()
    users = {uid: replace(u, joined_at=now) for uid, u in state.users.items()}
    return StateStore(replace(state, users=users))


@pytest.fixture
def client(store):
    from toastx.api.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_config] = lambda: ToastXConfig()
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def _auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def _create(client, giver="alice", body=None) -> str:
    resp = client.post("/api/recognitions", json=body or QUICK_TOAST, headers=_auth(giver))
    assert resp.status_code == 201, resp.text
    return resp.json()["recognition_id"]


# ===========================================================================
# Health & auth
# ===========================================================================
class TestHealthEndpoint:
    def test_health_returns_ok(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestAuthGuards:
    def test_missing_token(self, client):
        resp = client.post("/api/recognitions", json=QUICK_TOAST)
        assert resp.status_code == 401

    def test_garbage_token(self, client):
        resp = client.post(
            "/api/recognitions", json=QUICK_TOAST, headers={"Authorization": "Bearer nope"}
        )
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid token"

    def test_token_for_unknown_user(self, client):
        resp = client.get("/api/notifications", headers=_auth("ghost"))
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Unknown user"


# ===========================================================================
# Recognitions
# ===========================================================================
class TestRecognitionRoutes:
    def test_create_and_read_back(self, client, store):
        rid = _create(client)
        assert store.state.users["bob"].credits == 5

        resp = client.get(f"/api/recognitions/{rid}", headers=_auth("carol"))
        assert resp.status_code == 200
        assert resp.json()["giver_id"] == "alice"

    def test_rejection_carries_suggestion(self, client):
        _create(client)
        resp = client.post("/api/recognitions", json=QUICK_TOAST, headers=_auth("alice"))
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["error"].startswith("You've recently recognized this person.")
        assert detail["suggested_action"]
        assert detail["cooldown_ends_at"]

    def test_invalid_enum_is_422(self, client):
        body = {**QUICK_TOAST, "value": "NOT_A_VALUE"}
        resp = client.post("/api/recognitions", json=body, headers=_auth("alice"))
        assert resp.status_code == 422

    def test_check_endpoint(self, client):
        resp = client.post(
            "/api/recognitions/check",
            json={"type": "QUICK_TOAST", "recipient_ids": ["bob"]},
            headers=_auth("alice"),
        )
        assert resp.status_code == 200
        assert resp.json()["allowed"] is True
        assert resp.json()["remaining"] == 3

    def test_feed_hides_private(self, client):
        _create(client, body={**QUICK_TOAST, "is_private": True})
        _create(client, body={**QUICK_TOAST, "recipient_ids": ["carol"]})
        items = client.get("/api/recognitions").json()["items"]
        assert [i["recipient_ids"] for i in items] == [["carol"]]

    def test_private_visible_to_participants_only(self, client):
        rid = _create(client, body={**QUICK_TOAST, "is_private": True})
        assert client.get(f"/api/recognitions/{rid}", headers=_auth("bob")).status_code == 200
        assert client.get(f"/api/recognitions/{rid}", headers=_auth("dave")).status_code == 404

    def test_unknown_recognition(self, client):
        assert client.get("/api/recognitions/rec-x", headers=_auth("bob")).status_code == 404


class TestSocialRoutes:
    def test_react_twice(self, client):
        rid = _create(client)
        url = f"/api/recognitions/{rid}/reactions"
        assert client.post(url, json={"type": "fire"}, headers=_auth("carol")).status_code == 201
        resp = client.post(url, json={"type": "fire"}, headers=_auth("carol"))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Already reacted"

        resp = client.delete(f"{url}/fire", headers=_auth("carol"))
        assert resp.status_code == 200

    def test_comment_lifecycle(self, client, store):
        rid = _create(client)
        resp = client.post(
            f"/api/recognitions/{rid}/comments", json={"content": "Congrats!"}, headers=_auth("carol")
        )
        cid = resp.json()["comment_id"]

        url = f"/api/recognitions/{rid}/comments/{cid}"
        assert client.patch(url, json={"content": "Edit"}, headers=_auth("dave")).status_code == 400
        assert client.patch(url, json={"content": "Congrats, Bob!"}, headers=_auth("carol")).status_code == 200
        assert client.delete(url, headers=_auth("carol")).status_code == 200
        assert store.state.recognitions[0].comments == ()

    def test_counters(self, client, store):
        rid = _create(client)
        client.post(f"/api/recognitions/{rid}/repost", headers=_auth("carol"))
        client.post(f"/api/recognitions/{rid}/bookmark", headers=_auth("carol"))
        rec = store.state.recognitions[0]
        assert (rec.reposts, rec.bookmarks) == (1, 1)
        assert client.post("/api/recognitions/nope/repost", headers=_auth("carol")).status_code == 404


# ===========================================================================
# Notifications
# ===========================================================================
class TestNotificationRoutes:
    def test_list_and_mark_read(self, client):
        _create(client)
        resp = client.get("/api/notifications", headers=_auth("bob"))
        body = resp.json()
        assert body["unread_count"] == 2
        note_id = body["items"][0]["id"]

        assert client.post(f"/api/notifications/{note_id}/read", headers=_auth("alice")).status_code == 404
        resp = client.post(f"/api/notifications/{note_id}/read", headers=_auth("bob"))
        assert resp.json()["unread_count"] == 1

    def test_read_all_and_clear(self, client):
        _create(client)
        client.post("/api/notifications/read-all", headers=_auth("bob"))
        assert client.get("/api/notifications", headers=_auth("bob")).json()["unread_count"] == 0
        client.delete("/api/notifications", headers=_auth("bob"))
        assert client.get("/api/notifications", headers=_auth("bob")).json()["items"] == []


# ===========================================================================
# Public
# ===========================================================================
class TestPublicRoutes:
    def test_users_and_profile(self, client):
        _create(client)
        users = client.get("/api/users").json()
        assert [u["id"] for u in users][:2] == ["alice", "bob"]

        profile = client.get("/api/users/bob").json()
        assert profile["credits"] == 5
        assert "recent_recipients" not in profile
        assert profile["badge_progress"]["receiving"]["next_badge"] == "RISING_STAR"

    def test_unknown_user(self, client):
        assert client.get("/api/users/ghost").status_code == 404

    def test_leaderboard_and_stats(self, client):
        _create(client)
        board = client.get("/api/leaderboard", params={"kind": "MOST_GENEROUS", "timeframe": "ALL_TIME"})
        assert board.json()["entries"][0]["user_id"] == "alice"
        assert client.get("/api/stats").json()["total_recognitions"] == 1

    def test_catalog(self, client):
        data = client.get("/api/catalog").json()
        assert len(data["values"]) == 6
        assert len(data["awards"]) == 16
        assert len(data["badges"]) == 13
