"""Tests for the templates endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quotecard.api.templates import router, set_editor_session, set_template_store
from quotecard.services.editor_session import EditorSession
from quotecard.services.template_store import TemplateStore


@pytest.fixture
def store(tmp_path):
    return TemplateStore(templates_file=tmp_path / "templates.json")


@pytest.fixture
def session(renderer):
    s = EditorSession(renderer=renderer)
    s.update_content(quote1="Saved words", author="Ana")
    s.update_style(bg_color="#101010")
    return s


@pytest.fixture
def client(store, session):
    app = FastAPI()
    app.include_router(router)
    set_template_store(store)
    set_editor_session(session)
    return TestClient(app)


class TestSaveTemplate:
    def test_save_from_session(self, client, store):
        resp = client.post("/templates", json={"name": "Night"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["name"] == "Night"
        assert data["settings"]["style"]["bg_color"] == "#101010"
        assert store.get("Night").settings.content.quote1 == "Saved words"

    def test_save_explicit_settings(self, client):
        body = {"name": "Plain", "settings": {"style": {"quote1_size": 40}}}
        resp = client.post("/templates", json=body)
        assert resp.status_code == 201
        assert resp.json()["settings"]["style"]["quote1_size"] == 40

    def test_blank_name_numbered(self, client):
        resp = client.post("/templates", json={})
        assert resp.json()["name"] == "Template 1"

    def test_duplicate_conflict(self, client):
        client.post("/templates", json={"name": "A"})
        resp = client.post("/templates", json={"name": "A"})
        assert resp.status_code == 409

    def test_overwrite(self, client, session):
        client.post("/templates", json={"name": "A"})
        session.update_content(quote1="Changed")
        resp = client.post("/templates", json={"name": "A", "overwrite": True})
        assert resp.status_code == 201
        assert resp.json()["settings"]["content"]["quote1"] == "Changed"


class TestListAndGet:
    def test_list(self, client, red_data_url, session):
        client.post("/templates", json={"name": "A"})
        session.apply_background_data_url(red_data_url)
        client.post("/templates", json={"name": "B"})

        data = client.get("/templates").json()
        assert data["count"] == 2
        assert [t["name"] for t in data["templates"]] == ["A", "B"]
        assert [t["has_background_image"] for t in data["templates"]] == [False, True]

    def test_get_missing(self, client):
        assert client.get("/templates/nope").status_code == 404


class TestImport:
    def test_import_browser_record(self, client):
        record = {"name": "Legacy", "bgColor": "#222222", "quote1Text": "Old", "quote1Offset": 9}
        resp = client.post("/templates/import", json={"settings": record})
        assert resp.status_code == 201
        data = resp.json()
        assert data["name"] == "Legacy"
        assert data["settings"]["style"]["bg_color"] == "#222222"
        assert data["settings"]["offsets"]["quote1"] == 9

    def test_import_bad_values(self, client):
        resp = client.post("/templates/import", json={"name": "X", "settings": {"bgColor": "nope"}})
        assert resp.status_code == 422


class TestApplyAndDelete:
    def test_apply(self, client, session):
        client.post("/templates", json={"name": "A"})
        session.update_content(quote1="Different")
        session.update_style(bg_color="#FFFFFF")

        resp = client.post("/templates/A/apply")
        assert resp.status_code == 200
        assert resp.json()["has_background_image"] is False
        assert session.state.content.quote1 == "Saved words"
        assert session.state.style.bg_color == "#101010"

    def test_apply_missing(self, client):
        assert client.post("/templates/nope/apply").status_code == 404

    def test_delete(self, client, store):
        client.post("/templates", json={"name": "A"})
        resp = client.delete("/templates/A")
        assert resp.status_code == 200
        assert not store.exists("A")
        assert client.delete("/templates/A").status_code == 404
