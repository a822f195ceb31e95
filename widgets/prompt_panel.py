"""Smart prompt suggestions for the remove and recolor tools."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from models.ai_models import PromptSuggestion, SuggestionType
from widgets.api_client import ApiClientError, EditZenApiClient
from widgets.panel_state import PanelState, PanelStatus

LOGGER = logging.getLogger(__name__)

SuggestionCallback = Callable[[str, Optional[str]], None]


@dataclass(frozen=True)
class SuggestionButton:
    label: str
    value: str
    color: Optional[str]
    high_confidence: bool


@dataclass(frozen=True)
class PromptPanelView:
    status: PanelStatus
    buttons: Tuple[SuggestionButton, ...] = ()


class SmartPromptPanel:
    """Fetch suggestions whenever the image or the transformation changes.

    Failures and empty results render nothing: suggestions are optional.
    """

    def __init__(self, api: EditZenApiClient, on_suggestion_click: SuggestionCallback) -> None:
        self.api = api
        self.on_suggestion_click = on_suggestion_click
        self.image_url = ""
        self.transformation_type = ""
        self.suggestions: List[PromptSuggestion] = []
        self.state = PanelState()

    async def update(self, image_url: Optional[str], transformation_type: str) -> None:
        image_url = image_url or ""
        unchanged = (image_url, transformation_type) == (self.image_url, self.transformation_type)
        if unchanged and self.state.status is not PanelStatus.HIDDEN:
            return
        self.image_url = image_url
        self.transformation_type = transformation_type
        if not image_url:
            self.suggestions = []
            self.state.hide()
            return

        generation = self.state.begin()
        try:
            result = await self.api.suggest(image_url, transformation_type)
        except (httpx.HTTPError, ApiClientError) as exc:
            LOGGER.warning("Prompt suggestion request failed: %s", exc)
            if self.state.is_current(generation):
                self.suggestions = []
                self.state.fail("Failed to get suggestions")
            return

        if not self.state.is_current(generation):
            return
        self._apply(result)

    def _apply(self, result: dict) -> None:
        self.suggestions = []
        if not result.get("success"):
            self.state.fail(result.get("error") or "Failed to get suggestions")
            return
        for item in result.get("data") or []:
            try:
                self.suggestions.append(PromptSuggestion.model_validate(item))
            except PydanticValidationError:
                LOGGER.warning("Ignoring malformed suggestion: %r", item)
        self.state.settle(has_result=bool(self.suggestions))

    def _shows_color(self) -> bool:
        return self.transformation_type == SuggestionType.RECOLOR.value

    def view(self) -> Optional[PromptPanelView]:
        """Return the render state, or None when nothing should be drawn."""
        status = self.state.status
        if status is PanelStatus.LOADING:
            return PromptPanelView(status=status)
        if status is not PanelStatus.READY:
            return None
        shows_color = self._shows_color()
        return PromptPanelView(
            status=status,
            buttons=tuple(
                SuggestionButton(
                    label=suggestion.label,
                    value=suggestion.value,
                    color=suggestion.suggested_color if shows_color else None,
                    high_confidence=suggestion.is_high_confidence,
                )
                for suggestion in self.suggestions
            ),
        )

    def click(self, index: int) -> None:
        """Send the chosen suggestion's prompt (and color, for recolor) to the editor."""
        suggestion = self.suggestions[index]
        color = suggestion.suggested_color if self._shows_color() else None
        self.on_suggestion_click(suggestion.value, color)
