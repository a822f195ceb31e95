"""Async HTTP client the UI surfaces use to reach the assistant endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx


class ApiClientError(Exception):
    """The server replied with something other than a JSON envelope."""


class EditZenApiClient:
    """Post JSON to the `/api/ai` endpoints and return the decoded envelope.

    Error envelopes (`{"error": ...}`) are returned like successful ones; the
    caller checks `success`. Transport failures raise `httpx.HTTPError`.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.post(path, json=body)
        try:
            envelope = response.json()
        except ValueError as exc:
            raise ApiClientError(f"{path} returned a non-JSON response ({response.status_code})") from exc
        if not isinstance(envelope, dict):
            raise ApiClientError(f"{path} returned an unexpected payload")
        return envelope

    async def chat(self, messages: List[Dict[str, Any]], context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"messages": messages}
        if context:
            body["context"] = context
        return await self._post("/api/ai/chat", body)

    async def analyze(self, image_url: str) -> Dict[str, Any]:
        return await self._post("/api/ai/analyze", {"imageUrl": image_url})

    async def suggest(self, image_url: str, transformation_type: str) -> Dict[str, Any]:
        return await self._post(
            "/api/ai/suggest",
            {"imageUrl": image_url, "transformationType": transformation_type},
        )

    async def aclose(self) -> None:
        await self.client.aclose()
