"""Scene analysis, prompt suggestions and chat through the OpenAI Responses API."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError as PydanticValidationError

from models.ai_models import (
    ChatContext,
    ChatMessage,
    ImageAnalysisResult,
    PromptSuggestion,
    SuggestionType,
)
from services.errors import ParseError, UpstreamError, ValidationError
from services.image_fetcher import ImageFetcher
from services.openai.media_inputs import build_chat_inputs, build_image_inputs
from services.openai.prompts import (
    CHAT_ACKNOWLEDGEMENT,
    analysis_prompt,
    chat_system_prompt,
    suggestion_prompt,
)
from services.openai.response_parser import (
    decode_json_span,
    extract_text,
    extract_usage,
    find_json_span,
)

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = "gpt-5"


class EditingAssistantService:
    """Forward editing questions and images to a generative model."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        fetcher: Optional[ImageFetcher] = None,
        model: str = DEFAULT_MODEL,
    ) -> None:
        """Initialize the service.

        Args:
            client: Async OpenAI client, or None when no credential is configured.
                Every call then fails with UpstreamError.
            fetcher: Image downloader used for URL inputs.
            model: Model name passed to the Responses API.
        """
        self.client = client
        self.fetcher = fetcher or ImageFetcher()
        self.model = model

    async def analyze_image(self, image_url: str) -> ImageAnalysisResult:
        """Describe an image and propose transformations.

        Raises:
            ParseError: If the reply has no JSON object or it cannot be decoded.
            UpstreamError: If the image fetch or the model call fails.
        """
        image = await self.fetcher.fetch(image_url)
        inputs = build_image_inputs(analysis_prompt(), image.data, image.mime_type)
        text = await self._generate(inputs, operation="analyze_image")

        span = find_json_span(text, "{")
        if span is None:
            LOGGER.error("No JSON object in analysis output: %r", text)
            raise ParseError("Failed to parse AI response")
        payload = decode_json_span(span)
        try:
            return ImageAnalysisResult.model_validate(payload)
        except PydanticValidationError as exc:
            LOGGER.error("Analysis output did not match the expected shape: %s", exc)
            raise ParseError("Analysis output did not match the expected shape") from exc

    async def suggest_prompts(
        self, image_url: str, transformation_type: SuggestionType | str
    ) -> List[PromptSuggestion]:
        """Suggest objects to remove or recolor.

        A reply without a JSON array is a normal outcome and yields an empty list.

        Raises:
            ValidationError: If `transformation_type` is not remove or recolor.
            ParseError: If the located array is not valid JSON.
            UpstreamError: If the image fetch or the model call fails.
        """
        try:
            kind = SuggestionType(transformation_type)
        except ValueError as exc:
            raise ValidationError("Valid transformation type (remove/recolor) is required") from exc

        image = await self.fetcher.fetch(image_url)
        inputs = build_image_inputs(suggestion_prompt(kind), image.data, image.mime_type)
        text = await self._generate(inputs, operation="suggest_prompts")

        span = find_json_span(text, "[")
        if span is None:
            LOGGER.info("No suggestion array in model output; returning no suggestions.")
            return []
        return self._coerce_suggestions(decode_json_span(span), kind)

    async def chat_with_assistant(
        self,
        messages: Sequence[ChatMessage],
        context: Optional[ChatContext] = None,
    ) -> str:
        """Answer the latest user message given the prior conversation.

        Raises:
            ValidationError: If `messages` is empty.
            UpstreamError: If the model call fails.
        """
        if not messages:
            raise ValidationError("Messages array is required")
        transformation_type = context.transformation_type if context else None
        inputs = build_chat_inputs(
            chat_system_prompt(transformation_type),
            CHAT_ACKNOWLEDGEMENT,
            list(messages),
        )
        return await self._generate(inputs, operation="chat_with_assistant")

    def _coerce_suggestions(self, items: List[Any], kind: SuggestionType) -> List[PromptSuggestion]:
        suggestions: List[PromptSuggestion] = []
        for item in items:
            try:
                suggestion = PromptSuggestion.model_validate(item)
            except PydanticValidationError as exc:
                LOGGER.warning("Skipping malformed suggestion %r: %s", item, exc.errors()[:1])
                continue
            if kind is not SuggestionType.RECOLOR and suggestion.suggested_color is not None:
                suggestion = suggestion.model_copy(update={"suggested_color": None})
            suggestions.append(suggestion)
        return suggestions

    def _resolve_client(self) -> AsyncOpenAI:
        if self.client is None:
            raise UpstreamError("OpenAI client is not configured.")
        return self.client

    async def _generate(self, inputs: List[Dict[str, Any]], *, operation: str) -> str:
        """Send one Responses API request and return its output text."""
        client = self._resolve_client()
        start_time = time.time()
        try:
            response = await client.responses.create(model=self.model, input=inputs)
        except OpenAIError as exc:
            LOGGER.error("OpenAI Responses API error during %s: %s", operation, exc)
            raise UpstreamError(f"Model call failed during {operation}") from exc

        usage = extract_usage(response)
        LOGGER.info(
            "%s completed in %.3fs (input_tokens=%s, output_tokens=%s)",
            operation,
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return extract_text(response)
