import threading
from concurrent.futures import ThreadPoolExecutor

from fastapi.testclient import TestClient

import app as app_module
from prompts import WELCOME_TEXT
from session import FAILURE_MESSAGES, FailureKind


# ═══════════════════════════════════════════════════════
# HEALTH / START
# ═══════════════════════════════════════════════════════

def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_start_returns_seeded_welcome(client):
    response = client.post("/start", json={"user_id": "u1"})
    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "awaiting_goal"
    assert data["busy"] is False
    assert data["messages"] == [{"role": "assistant", "content": WELCOME_TEXT}]


def test_messages_for_unknown_user_are_seeded(client):
    data = client.get("/messages/nobody").json()
    assert len(data["messages"]) == 1


# ═══════════════════════════════════════════════════════
# CHAT FLOW
# ═══════════════════════════════════════════════════════

def test_accepted_goal_gets_backend_reply(client, backend):
    client.post("/start", json={"user_id": "u1"})
    response = client.post("/chat", json={"user_id": "u1", "message": "I want to learn web development"})
    assert response.status_code == 200
    data = response.json()
    assert data["phase"] == "in_progress"
    assert [m["role"] for m in data["messages"]] == ["assistant", "user", "assistant"]
    assert data["messages"][-1]["content"] == backend.reply
    assert len(backend.calls) == 1


def test_rejected_goal_then_ungated_follow_up(client, backend):
    first = client.post("/chat", json={"user_id": "u2", "message": "asdkjhaskjdh"}).json()
    assert "Unclear Goal" in first["messages"][-1]["content"]
    assert backend.calls == []

    second = client.post("/chat", json={"user_id": "u2", "message": "asdkjhaskjdh"}).json()
    assert second["messages"][-1]["content"] == backend.reply
    assert len(backend.calls) == 1


def test_backend_rate_limit_surfaces_as_message(client, backend):
    backend.error = RuntimeError("Groq error 429: quota exceeded")
    data = client.post("/chat", json={"user_id": "u3", "message": "learn devops"}).json()
    assert data["messages"][-1]["content"] == FAILURE_MESSAGES[FailureKind.RATE_LIMITED]


def test_reset_clears_history(client):
    client.post("/chat", json={"user_id": "u4", "message": "learn devops"})
    data = client.post("/reset", json={"user_id": "u4"}).json()
    assert data["phase"] == "awaiting_goal"
    assert data["messages"] == [{"role": "assistant", "content": WELCOME_TEXT}]
    assert client.get("/messages/u4").json() == data


def test_sessions_are_per_user(client):
    client.post("/chat", json={"user_id": "a", "message": "learn devops"})
    assert len(client.get("/messages/b").json()["messages"]) == 1


# ═══════════════════════════════════════════════════════
# INPUT CHECKS
# ═══════════════════════════════════════════════════════

def test_blank_message_is_rejected(client, backend):
    response = client.post("/chat", json={"user_id": "u5", "message": "   "})
    assert response.status_code == 422
    assert backend.calls == []


def test_overlong_message_is_rejected(client):
    response = client.post("/chat", json={"user_id": "u6", "message": "x" * 501})
    assert response.status_code == 422


def test_busy_session_returns_conflict(client, monkeypatch):
    started, release = threading.Event(), threading.Event()

    def slow_backend(messages):
        started.set()
        release.wait(5)
        return "done"

    monkeypatch.setattr(app_module, "BACKEND", slow_backend)

    def first_message():
        with TestClient(app_module.app) as other:
            other.post("/chat", json={"user_id": "u7", "message": "learn devops"})

    worker = threading.Thread(target=first_message)
    worker.start()
    assert started.wait(5)
    try:
        assert client.get("/messages/u7").json()["busy"] is True
        response = client.post("/chat", json={"user_id": "u7", "message": "another message"})
        assert response.status_code == 409
    finally:
        release.set()
        worker.join(5)

    data = client.get("/messages/u7").json()
    assert data["busy"] is False
    assert [m["content"] for m in data["messages"]][-2:] == ["learn devops", "done"]


# ═══════════════════════════════════════════════════════
# SESSION REGISTRY
# ═══════════════════════════════════════════════════════

def test_concurrent_first_requests_share_one_session(client):
    with ThreadPoolExecutor(max_workers=8) as pool:
        sessions = list(pool.map(app_module.get_session, ["same-user"] * 32))
    assert all(s is sessions[0] for s in sessions)
    assert app_module.SESSIONS["same-user"] is sessions[0]


def test_no_static_mount_without_web_page(client):
    assert "/web" not in {getattr(r, "path", None) for r in app_module.app.routes}
    assert client.get("/web").status_code == 404
