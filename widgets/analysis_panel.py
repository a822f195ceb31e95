"""Scene analysis panel shown next to the image being edited."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from models.ai_models import ImageAnalysisResult
from widgets.api_client import ApiClientError, EditZenApiClient
from widgets.panel_state import PanelState, PanelStatus

LOGGER = logging.getLogger(__name__)
DEFAULT_ERROR = "Failed to analyze image"
LOADING_TEXT = "Analyzing image with AI..."


@dataclass(frozen=True)
class SuggestedEdit:
    transformation: str
    caption: str


@dataclass(frozen=True)
class AnalysisView:
    """What the renderer should draw for the panel."""

    status: PanelStatus
    message: Optional[str] = None
    description: str = ""
    objects: Tuple[str, ...] = ()
    colors: Tuple[str, ...] = ()
    edits: Tuple[SuggestedEdit, ...] = ()


class ImageAnalysisPanel:
    """Fetch and present the AI analysis for the current image URL."""

    def __init__(
        self,
        api: EditZenApiClient,
        on_suggestion_click: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.api = api
        self.on_suggestion_click = on_suggestion_click
        self.image_url = ""
        self.analysis: Optional[ImageAnalysisResult] = None
        self.state = PanelState()

    async def update(self, image_url: Optional[str]) -> None:
        """React to a new image URL; an unchanged URL is ignored."""
        image_url = image_url or ""
        if image_url == self.image_url and self.state.status is not PanelStatus.HIDDEN:
            return
        self.image_url = image_url
        if not image_url:
            self.analysis = None
            self.state.hide()
            return

        generation = self.state.begin()
        try:
            result = await self.api.analyze(image_url)
        except (httpx.HTTPError, ApiClientError) as exc:
            LOGGER.warning("Image analysis request failed: %s", exc)
            if self.state.is_current(generation):
                self.analysis = None
                self.state.fail(DEFAULT_ERROR)
            return

        if not self.state.is_current(generation):
            LOGGER.debug("Dropping stale analysis for %s", image_url)
            return
        self._apply(result)

    def _apply(self, result: dict) -> None:
        if not result.get("success"):
            self.analysis = None
            self.state.fail(result.get("error") or DEFAULT_ERROR)
            return
        try:
            self.analysis = ImageAnalysisResult.model_validate(result.get("data"))
        except PydanticValidationError:
            LOGGER.warning("Analysis payload had an unexpected shape: %r", result.get("data"))
            self.analysis = None
            self.state.fail(DEFAULT_ERROR)
            return
        self.state.settle(has_result=True)

    def view(self) -> Optional[AnalysisView]:
        """Return the render state, or None when the panel shows nothing."""
        status = self.state.status
        if status is PanelStatus.LOADING:
            return AnalysisView(status=status, message=LOADING_TEXT)
        if status is PanelStatus.ERROR:
            return AnalysisView(status=status, message=self.state.error)
        if status is not PanelStatus.READY or self.analysis is None:
            return None

        edits: Tuple[SuggestedEdit, ...] = ()
        if self.on_suggestion_click is not None:
            edits = tuple(
                SuggestedEdit(transformation=item.value, caption=f"Try {item.value}")
                for item in self.analysis.suggested_transformations
            )
        return AnalysisView(
            status=status,
            description=self.analysis.description,
            objects=tuple(self.analysis.objects),
            colors=tuple(self.analysis.colors),
            edits=edits,
        )

    def click(self, transformation: str) -> None:
        """Forward a suggested edit to the editing surface."""
        if self.on_suggestion_click is None:
            return
        self.on_suggestion_click(transformation)
