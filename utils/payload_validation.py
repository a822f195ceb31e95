"""Validation helpers for assistant request bodies.

Each helper returns the cleaned value or raises `ValidationError` with the
message the API reports back to the client. They run before any model call.
"""

from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from models.ai_models import ChatContext, ChatMessage, SuggestionType
from services.errors import ValidationError

IMAGE_URL_REQUIRED = "Image URL is required"
TRANSFORMATION_TYPE_REQUIRED = "Valid transformation type (remove/recolor) is required"
MESSAGES_REQUIRED = "Messages array is required"


def require_image_url(image_url: Any) -> str:
    """Return the trimmed image URL or reject a missing one."""
    if not isinstance(image_url, str) or not image_url.strip():
        raise ValidationError(IMAGE_URL_REQUIRED)
    return image_url.strip()


def require_suggestion_type(transformation_type: Any) -> SuggestionType:
    """Accept only the transformations that support prompt suggestions."""
    if not isinstance(transformation_type, str):
        raise ValidationError(TRANSFORMATION_TYPE_REQUIRED)
    try:
        return SuggestionType(transformation_type)
    except ValueError as exc:
        raise ValidationError(TRANSFORMATION_TYPE_REQUIRED) from exc


def require_messages(messages: Any) -> List[ChatMessage]:
    """Parse a non-empty list of chat messages, preserving order."""
    if not isinstance(messages, list) or not messages:
        raise ValidationError(MESSAGES_REQUIRED)
    try:
        return [ChatMessage.model_validate(message) for message in messages]
    except PydanticValidationError as exc:
        raise ValidationError("Invalid chat message") from exc


def parse_context(context: Any) -> Optional[ChatContext]:
    """Parse the optional chat context."""
    if context is None:
        return None
    try:
        return ChatContext.model_validate(context)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid chat context") from exc
