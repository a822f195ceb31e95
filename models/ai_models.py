"""Pydantic models exchanged between the widgets, the API and the model service."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_OBJECTS = 5
MAX_COLORS = 4
HIGH_CONFIDENCE_THRESHOLD = 0.8


class TransformationType(str, Enum):
    """Editing operations offered by the application."""

    RESTORE = "restore"
    FILL = "fill"
    REMOVE = "remove"
    RECOLOR = "recolor"
    REMOVE_BACKGROUND = "removeBackground"


class SuggestionType(str, Enum):
    """Transformations that support smart prompt suggestions."""

    REMOVE = "remove"
    RECOLOR = "recolor"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    """One turn of the assistant conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class ChatContext(BaseModel):
    """Editing context sent alongside a chat request."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    transformation_type: Optional[str] = Field(default=None, alias="transformationType")


class ImageAnalysisResult(BaseModel):
    """Scene description, detected objects and suggested edits for an image."""

    model_config = ConfigDict(populate_by_name=True)

    description: str
    objects: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    suggested_transformations: List[TransformationType] = Field(
        default_factory=list, alias="suggestedTransformations"
    )

    @field_validator("objects")
    @classmethod
    def _limit_objects(cls, value: List[str]) -> List[str]:
        return value[:MAX_OBJECTS]

    @field_validator("colors")
    @classmethod
    def _limit_colors(cls, value: List[str]) -> List[str]:
        return value[:MAX_COLORS]

    @field_validator("suggested_transformations", mode="before")
    @classmethod
    def _known_transformations(cls, value: Any) -> Any:
        # Unknown tags are dropped rather than failing the whole analysis.
        if not isinstance(value, list):
            return value
        known = {item.value for item in TransformationType}
        kept: List[str] = []
        for item in value:
            if isinstance(item, str) and item in known and item not in kept:
                kept.append(item)
        return kept

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PromptSuggestion(BaseModel):
    """A clickable prompt proposed for the remove or recolor tools."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    value: str
    suggested_color: Optional[str] = Field(default=None, alias="suggestedColor")
    confidence: float = Field(allow_inf_nan=False)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)

    @property
    def is_high_confidence(self) -> bool:
        return self.confidence >= HIGH_CONFIDENCE_THRESHOLD

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
