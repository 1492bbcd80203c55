"""Tests for the stateless card endpoints."""

import io

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image

from quotecard.api.cards import router, set_card_renderer


@pytest.fixture
def client(renderer):
    app = FastAPI()
    app.include_router(router)
    set_card_renderer(renderer)
    return TestClient(app)


def card(**overrides):
    body = {"content": {"quote1": "Hello world", "author": "Ana"}}
    body.update(overrides)
    return body


class TestRender:
    def test_render_png(self, client):
        resp = client.post("/cards/render", json=card(style={"card_width": 600, "card_height": 700}))
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        img = Image.open(io.BytesIO(resp.content))
        assert img.size == (600, 700)

    def test_render_with_background(self, client, red_data_url):
        resp = client.post("/cards/render", json=card(background={"data_url": red_data_url, "opacity": 1}))
        assert resp.status_code == 200

    def test_bad_background_is_400(self, client):
        resp = client.post("/cards/render", json=card(background={"data_url": "data:image/png;base64,AAAA"}))
        assert resp.status_code == 400

    def test_bad_color_is_422(self, client):
        resp = client.post("/cards/render", json=card(style={"bg_color": "blue"}))
        assert resp.status_code == 422


class TestLayout:
    def test_layout(self, client):
        resp = client.post("/cards/layout", json=card())
        assert resp.status_code == 200
        data = resp.json()
        assert (data["width"], data["height"]) == (970, 1074)
        assert data["quote1"]["lines"] == ["Hello world"]
        assert data["author"]["lines"] == ["Ana"]
        assert data["quote2"] is None
        assert data["divider1_y"] is None
        assert data["author_divider_y"] is not None

    def test_quote2_enabled(self, client):
        body = card(style={"enable_quote2": True})
        body["content"]["quote2"] = "Second"
        data = client.post("/cards/layout", json=body).json()
        assert data["quote2"]["lines"] == ["Second"]
        assert data["divider1_y"] is not None
        assert data["quote2_area_height"] > 0


class TestHitTest:
    def test_quote1_hit(self, client):
        layout = client.post("/cards/layout", json=card()).json()
        x = layout["width"] / 2
        y = layout["quote1"]["baselines"][0]
        resp = client.post("/cards/hit-test", json={**card(), "x": x, "y": y})
        assert resp.status_code == 200
        assert resp.json() == {"element": "quote1", "over_image": False}

    def test_miss(self, client):
        resp = client.post("/cards/hit-test", json={**card(), "x": 2, "y": 2})
        assert resp.json()["element"] == "none"

    def test_over_image(self, client, red_data_url):
        body = {**card(background={"data_url": red_data_url}), "x": 100, "y": 100}
        data = client.post("/cards/hit-test", json=body).json()
        assert data["element"] == "none"
        assert data["over_image"] is True
