"""Tests for the quote history endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quotecard.api.history import router, set_quote_history
from quotecard.services.quote_history import QuoteHistory


@pytest.fixture
def history(tmp_path):
    return QuoteHistory(history_file=tmp_path / "quote_history.json", limit=5)


@pytest.fixture
def client(history):
    app = FastAPI()
    app.include_router(router)
    set_quote_history(history)
    return TestClient(app)


def test_list_most_recent_first(client, history):
    history.add("first")
    history.add("second")
    resp = client.get("/history")
    assert resp.status_code == 200
    assert [e["text"] for e in resp.json()] == ["second", "first"]
    assert all(isinstance(e["ts"], int) for e in resp.json())


def test_empty(client):
    assert client.get("/history").json() == []


def test_clear(client, history):
    history.add("gone")
    resp = client.delete("/history")
    assert resp.status_code == 200
    assert len(history) == 0
    assert client.get("/history").json() == []
