import pytest
from fastapi.testclient import TestClient

import app as app_module


class FakeBackend:
    """Records every request and answers with a canned reply or raises."""

    def __init__(self, reply="Great goal! How many hours per day can you commit?", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def __call__(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend, monkeypatch):
    """HTTP client wired to a fake backend with an empty session registry."""
    monkeypatch.setattr(app_module, "BACKEND", backend)
    monkeypatch.setattr(app_module, "SESSIONS", {})
    with TestClient(app_module.app) as c:
        yield c
