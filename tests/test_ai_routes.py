"""Tests for the /api/ai endpoints and their response envelopes."""
import pytest
from fastapi.testclient import TestClient
from openai import OpenAIError

from main import create_app
from utils.settings import Settings

CAT_REPLY = (
    'Here you go:\n```json\n{"description":"a cat","objects":["cat"],'
    '"colors":["orange"],"suggestedTransformations":["recolor"]}\n```'
)


class TestAnalyzeRoute:
    """Tests for POST /api/ai/analyze."""

    def test_success_envelope(self, client, fake_openai):
        fake_openai.responses.output_text = CAT_REPLY

        response = client.post("/api/ai/analyze", json={"imageUrl": "https://x/img.jpg"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "description": "a cat",
                "objects": ["cat"],
                "colors": ["orange"],
                "suggestedTransformations": ["recolor"],
            },
        }

    @pytest.mark.parametrize("body", [{"imageUrl": ""}, {}, {"imageUrl": "   "}, {"imageUrl": 42}])
    def test_missing_image_url_is_rejected(self, client, fake_openai, stub_fetcher, body):
        response = client.post("/api/ai/analyze", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Image URL is required"}
        assert stub_fetcher.urls == []
        assert fake_openai.responses.calls == []

    def test_parse_failure_is_generic_server_error(self, client, fake_openai):
        fake_openai.responses.output_text = "I can't see anything."

        response = client.post("/api/ai/analyze", json={"imageUrl": "https://x/img.jpg"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to analyze image"}

    def test_fetch_failure_is_generic_server_error(self, client, stub_fetcher):
        stub_fetcher.fail = True

        response = client.post("/api/ai/analyze", json={"imageUrl": "https://x/img.jpg"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to analyze image"}


class TestSuggestRoute:
    """Tests for POST /api/ai/suggest."""

    def test_success_envelope(self, client, fake_openai):
        fake_openai.responses.output_text = '[{"label":"Remove sign","value":"sign","confidence":0.92}]'

        response = client.post(
            "/api/ai/suggest",
            json={"imageUrl": "https://x/img.jpg", "transformationType": "remove"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": [{"label": "Remove sign", "value": "sign", "confidence": 0.92}],
        }

    def test_non_finite_confidence_still_returns_envelope(self, client, fake_openai):
        fake_openai.responses.output_text = (
            '[{"label":"Remove sign","value":"sign","confidence":NaN},'
            ' {"label":"Remove bin","value":"bin","confidence":0.5}]'
        )

        response = client.post(
            "/api/ai/suggest",
            json={"imageUrl": "https://x/img.jpg", "transformationType": "remove"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": [{"label": "Remove bin", "value": "bin", "confidence": 0.5}],
        }

    def test_no_array_is_empty_success(self, client, fake_openai):
        fake_openai.responses.output_text = "No suggestions."

        response = client.post(
            "/api/ai/suggest",
            json={"imageUrl": "https://x/img.jpg", "transformationType": "recolor"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": []}

    @pytest.mark.parametrize("transformation_type", [None, "", "restore", "fill", "removeBackground", "REMOVE", 3])
    def test_invalid_transformation_type_is_rejected(self, client, fake_openai, stub_fetcher, transformation_type):
        body = {"imageUrl": "https://x/img.jpg"}
        if transformation_type is not None:
            body["transformationType"] = transformation_type

        response = client.post("/api/ai/suggest", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Valid transformation type (remove/recolor) is required"}
        assert stub_fetcher.urls == []
        assert fake_openai.responses.calls == []

    def test_missing_image_url_is_checked_first(self, client):
        response = client.post("/api/ai/suggest", json={"transformationType": "bogus"})

        assert response.status_code == 400
        assert response.json() == {"error": "Image URL is required"}

    def test_model_failure_is_generic_server_error(self, client, fake_openai):
        fake_openai.responses.error = OpenAIError("secret upstream detail")

        response = client.post(
            "/api/ai/suggest",
            json={"imageUrl": "https://x/img.jpg", "transformationType": "remove"},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate suggestions"}
        assert "secret" not in response.text


class TestChatRoute:
    """Tests for POST /api/ai/chat."""

    def test_success_envelope(self, client, fake_openai):
        fake_openai.responses.output_text = "Hello! Upload an image to get started."

        response = client.post("/api/ai/chat", json={"messages": [{"role": "user", "content": "Hi"}]})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["role"] == "assistant"
        assert body["data"]["content"] == "Hello! Upload an image to get started."
        assert body["data"]["timestamp"]

    def test_full_history_reaches_the_model(self, client, fake_openai):
        fake_openai.responses.output_text = "Sure."
        messages = [
            {"role": "user", "content": "Hi", "timestamp": "2026-01-01T10:00:00Z"},
            {"role": "assistant", "content": "Hello!", "timestamp": "2026-01-01T10:00:01Z"},
            {"role": "user", "content": "Make the sky blue"},
        ]

        client.post(
            "/api/ai/chat",
            json={"messages": messages, "context": {"transformationType": "recolor"}},
        )

        inputs = fake_openai.responses.calls[0]["input"]
        assert [turn["content"] for turn in inputs[2:]] == ["Hi", "Hello!", "Make the sky blue"]
        assert inputs[0]["content"].endswith("Current transformation: recolor")

    @pytest.mark.parametrize("body", [{}, {"messages": []}, {"messages": "Hi"}, {"messages": {"role": "user"}}])
    def test_missing_messages_are_rejected(self, client, fake_openai, body):
        response = client.post("/api/ai/chat", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Messages array is required"}
        assert fake_openai.responses.calls == []

    def test_malformed_message_is_rejected(self, client, fake_openai):
        response = client.post("/api/ai/chat", json={"messages": [{"role": "system", "content": "x"}]})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid chat message"}
        assert fake_openai.responses.calls == []

    def test_model_failure_is_generic_server_error(self, client, fake_openai):
        fake_openai.responses.error = OpenAIError("quota exceeded")

        response = client.post("/api/ai/chat", json={"messages": [{"role": "user", "content": "Hi"}]})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to get chat response"}


def test_non_object_body_is_rejected(client):
    response = client.post("/api/ai/analyze", json=["https://x/img.jpg"])

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/ai/nothing")

    assert response.status_code == 404
    assert "error" in response.json()


def test_missing_credential_fails_at_call_time(monkeypatch):
    """The app starts without a key; the endpoints then fail with the generic error."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    app = create_app(settings=Settings(openai_api_key=None))
    with TestClient(app) as client:
        assert client.get("/health").json() == {"ok": True, "openai_available": False}
        response = client.post("/api/ai/chat", json={"messages": [{"role": "user", "content": "Hi"}]})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to get chat response"}
