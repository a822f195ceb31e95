"""Controller for the chat, analysis and suggestion endpoints."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException

from services.errors import ValidationError
from services.openai.editing_assistant import EditingAssistantService
from utils.payload_validation import (
    parse_context,
    require_image_url,
    require_messages,
    require_suggestion_type,
)

LOGGER = logging.getLogger(__name__)


class AIController:
    """Validate requests, call the assistant service and wrap the results.

    Validation failures become 400 responses carrying their message. Any
    service failure is logged and reported as a fixed 500 message so the
    cause never reaches the client.
    """

    def __init__(self, service: Optional[EditingAssistantService] = None) -> None:
        self.service = service

    def _resolve_service(self, service: Optional[EditingAssistantService]) -> EditingAssistantService:
        resolved = service or self.service
        if resolved is None:
            raise RuntimeError("Assistant service is not configured.")
        return resolved

    async def chat(self, payload: Dict[str, Any], service: Optional[EditingAssistantService] = None) -> Dict[str, Any]:
        """Return the assistant's reply to the conversation in `payload`.

        Args:
            payload: Request body with `messages` and an optional `context`.
            service: Assistant service from application state.

        Returns:
            Envelope holding the assistant message.

        Raises:
            HTTPException: 400 for invalid input, 500 when the reply cannot be produced.
        """
        try:
            messages = require_messages(payload.get("messages"))
            context = parse_context(payload.get("context"))
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            reply = await self._resolve_service(service).chat_with_assistant(messages, context)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Chat error: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to get chat response") from exc

        return {
            "success": True,
            "data": {
                "role": "assistant",
                "content": reply,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        }

    async def analyze(self, payload: Dict[str, Any], service: Optional[EditingAssistantService] = None) -> Dict[str, Any]:
        """Return the scene analysis for `payload["imageUrl"]`."""
        try:
            image_url = require_image_url(payload.get("imageUrl"))
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            analysis = await self._resolve_service(service).analyze_image(image_url)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Image analysis error: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to analyze image") from exc

        return {"success": True, "data": analysis.to_payload()}

    async def suggest(self, payload: Dict[str, Any], service: Optional[EditingAssistantService] = None) -> Dict[str, Any]:
        """Return remove or recolor prompt suggestions for an image."""
        try:
            image_url = require_image_url(payload.get("imageUrl"))
            transformation_type = require_suggestion_type(payload.get("transformationType"))
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        try:
            suggestions = await self._resolve_service(service).suggest_prompts(image_url, transformation_type)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Prompt suggestion error: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to generate suggestions") from exc

        return {"success": True, "data": [suggestion.to_payload() for suggestion in suggestions]}
