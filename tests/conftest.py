"""Pytest configuration and shared fixtures."""
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.errors import UpstreamError
from services.image_fetcher import FetchedImage
from services.openai.editing_assistant import EditingAssistantService
from utils.settings import Settings
from widgets.api_client import EditZenApiClient


class FakeResponses:
    """Stands in for `AsyncOpenAI().responses`, replaying canned output text."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.output_text = ""
        self.error: Optional[Exception] = None

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            output=[],
            output_text=self.output_text,
            usage=SimpleNamespace(input_tokens=12, output_tokens=7),
        )


class FakeOpenAI:
    def __init__(self) -> None:
        self.responses = FakeResponses()


class StubFetcher:
    """Returns fixed image bytes and records requested URLs."""

    def __init__(self) -> None:
        self.urls: List[str] = []
        self.fail = False
        self.image = FetchedImage(data=b"\x89PNG fake", mime_type="image/png")

    async def fetch(self, image_url: str) -> FetchedImage:
        self.urls.append(image_url)
        if self.fail:
            raise UpstreamError("Image fetch failed")
        return self.image


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def stub_fetcher():
    return StubFetcher()


@pytest.fixture
def assistant(fake_openai, stub_fetcher):
    """Assistant service wired to the fake model and the stub fetcher."""
    return EditingAssistantService(fake_openai, stub_fetcher, model="test-model")


@pytest.fixture
def app(assistant):
    return create_app(settings=Settings(), assistant=assistant)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
async def api_client(app):
    """Widget-side client talking to the real app in-process."""
    api = EditZenApiClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))
    yield api
    await api.aclose()
