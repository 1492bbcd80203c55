"""Tests for the generation proxy endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quotecard.api.generate import router, set_openai_client
from quotecard.workers.openai_proxy import InlineResult, OpenAIClient, UpstreamResponse


@pytest.fixture
def openai_client():
    return OpenAIClient(api_key="sk-test", base_url="https://upstream.test/v1")


@pytest.fixture
def client(openai_client):
    app = FastAPI()
    app.include_router(router)
    set_openai_client(openai_client)
    return TestClient(app)


class TestCors:
    def test_options_short_circuits(self, client):
        resp = client.options("/api/generate-quote")
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-methods"] == "GET,POST,OPTIONS"
        assert resp.headers["access-control-allow-headers"] == "Content-Type, Authorization"
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_headers_on_errors(self, client):
        resp = client.post("/api/generate-quote", json={})
        assert resp.headers["access-control-allow-origin"] == "*"


class TestGenerateQuote:
    def test_missing_messages(self, client):
        resp = client.post("/api/generate-quote", json={})
        assert resp.status_code == 400
        assert resp.json() == {"error": 'Invalid request. Expected "messages" array.'}

    def test_messages_not_a_list(self, client):
        resp = client.post("/api/generate-quote", json={"messages": "hi"})
        assert resp.status_code == 400

    def test_invalid_json_body(self, client):
        resp = client.post(
            "/api/generate-quote",
            content=b"not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400

    def test_missing_api_key(self, client, openai_client):
        openai_client.api_key = ""
        resp = client.post("/api/generate-quote", json={"messages": []})
        assert resp.status_code == 500
        data = resp.json()
        assert data["error"] == "Server configuration error"
        assert "OPENAI_API_KEY" in data["message"]

    def test_forwards_with_defaults(self, client, openai_client):
        upstream = {"choices": [{"message": {"content": "Hi"}}]}
        with patch.object(
            openai_client, "chat_completion", new=AsyncMock(return_value=UpstreamResponse(200, upstream))
        ) as mock_chat:
            resp = client.post(
                "/api/generate-quote",
                json={"messages": [{"role": "user", "content": "x"}], "temperature": 0.5},
            )

        assert resp.status_code == 200
        assert resp.json() == upstream
        payload = mock_chat.call_args.args[0]
        assert payload["model"] == "gpt-4o-mini"
        assert payload["temperature"] == 0.5
        assert payload["top_p"] == 0.9
        assert payload["presence_penalty"] == 0.7
        assert payload["frequency_penalty"] == 0.6
        assert payload["max_tokens"] == 130

    def test_upstream_error_propagated(self, client, openai_client):
        body = {"error": {"message": "Incorrect API key provided"}}
        with patch.object(
            openai_client, "chat_completion", new=AsyncMock(return_value=UpstreamResponse(401, body))
        ):
            resp = client.post("/api/generate-quote", json={"messages": []})

        assert resp.status_code == 401
        assert resp.json() == {"error": "Incorrect API key provided", "details": body}

    def test_upstream_error_without_message(self, client, openai_client):
        with patch.object(
            openai_client, "chat_completion", new=AsyncMock(return_value=UpstreamResponse(503, {}))
        ):
            resp = client.post("/api/generate-quote", json={"messages": []})
        assert resp.status_code == 503
        assert resp.json()["error"] == "OpenAI API request failed"

    def test_unexpected_failure(self, client, openai_client):
        with patch.object(
            openai_client, "chat_completion", new=AsyncMock(side_effect=RuntimeError("socket closed"))
        ):
            resp = client.post("/api/generate-quote", json={"messages": []})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to generate quote", "message": "socket closed"}


class TestGenerateImage:
    def test_empty_prompt(self, client):
        resp = client.post("/api/generate-image", json={"prompt": ""})
        assert resp.status_code == 400
        assert resp.json() == {"error": 'Invalid request. Expected "prompt" string.'}

    def test_missing_prompt(self, client):
        resp = client.post("/api/generate-image", json={})
        assert resp.status_code == 400

    def test_missing_api_key(self, client, openai_client):
        openai_client.api_key = ""
        resp = client.post("/api/generate-image", json={"prompt": "sky"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Server configuration error"

    def test_success_with_inline(self, client, openai_client):
        upstream = {"data": [{"url": "https://cdn.test/a.png"}]}

        async def inline(data):
            data["data"][0]["b64_json"] = "QUJD"
            data["data"][0]["data_url"] = "data:image/png;base64,QUJD"
            return InlineResult(ok=True)

        with patch.object(
            openai_client, "create_image", new=AsyncMock(return_value=UpstreamResponse(200, upstream))
        ) as mock_image, patch.object(openai_client, "inline_first_image", new=inline):
            resp = client.post("/api/generate-image", json={"prompt": "sky"})

        assert resp.status_code == 200
        item = resp.json()["data"][0]
        assert item["url"] == "https://cdn.test/a.png"
        assert item["b64_json"] == "QUJD"
        assert item["data_url"] == "data:image/png;base64,QUJD"
        payload = mock_image.call_args.args[0]
        assert payload == {
            "model": "dall-e-3",
            "prompt": "sky",
            "size": "1024x1024",
            "quality": "standard",
            "n": 1,
        }

    def test_inline_failure_returns_url(self, client, openai_client):
        upstream = {"data": [{"url": "https://cdn.test/a.png"}]}
        with patch.object(
            openai_client, "create_image", new=AsyncMock(return_value=UpstreamResponse(200, upstream))
        ), patch.object(
            openai_client, "inline_first_image", new=AsyncMock(return_value=InlineResult(ok=False, error="403"))
        ):
            resp = client.post("/api/generate-image", json={"prompt": "sky"})

        assert resp.status_code == 200
        assert resp.json() == upstream

    def test_upstream_error(self, client, openai_client):
        body = {"error": {"message": "content policy"}}
        with patch.object(
            openai_client, "create_image", new=AsyncMock(return_value=UpstreamResponse(400, body))
        ):
            resp = client.post("/api/generate-image", json={"prompt": "sky"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "content policy", "details": body}

    def test_unexpected_failure(self, client, openai_client):
        with patch.object(openai_client, "create_image", new=AsyncMock(side_effect=ValueError("bad json"))):
            resp = client.post("/api/generate-image", json={"prompt": "sky"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to generate image", "message": "bad json"}


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["message"]
        assert data["environment"] == "development"
        assert data["timestamp"].endswith("Z")


class TestMethodGuard:
    @pytest.mark.parametrize("path", ["/api/generate-quote", "/api/generate-image"])
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_only_post_allowed(self, client, path, method):
        resp = client.request(method, path)
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_health_answers_any_method(self, client):
        resp = client.options("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
