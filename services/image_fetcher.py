"""Download images referenced by URL so they can be sent to the model inline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from services.errors import UpstreamError

LOGGER = logging.getLogger(__name__)
DEFAULT_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class FetchedImage:
    """Raw image bytes with their MIME type."""

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE


def _mime_type(content_type: Optional[str]) -> str:
    if not content_type:
        return DEFAULT_MIME_TYPE
    mime_type = content_type.split(";", 1)[0].strip().lower()
    return mime_type or DEFAULT_MIME_TYPE


class ImageFetcher:
    """Fetch publicly reachable images over HTTP."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0) -> None:
        """Initialize the fetcher.

        Args:
            client: Optional shared async HTTP client; one is created when omitted.
            timeout: Request timeout in seconds for the created client.
        """
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, image_url: str) -> FetchedImage:
        """Download `image_url`.

        Raises:
            UpstreamError: If the request fails, returns a non-2xx status, or has no body.
        """
        if not image_url:
            raise UpstreamError("Image URL is empty.")
        try:
            response = await self.client.get(image_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            LOGGER.error("Image fetch returned %s for %s", exc.response.status_code, image_url)
            raise UpstreamError(f"Image fetch failed with status {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.error("Image fetch failed for %s: %s", image_url, exc)
            raise UpstreamError("Image fetch failed") from exc

        if not response.content:
            raise UpstreamError("Fetched image is empty.")
        return FetchedImage(data=response.content, mime_type=_mime_type(response.headers.get("content-type")))

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
