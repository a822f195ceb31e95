"""Floating chat widget: one conversation, one request in flight at a time."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from models.ai_models import ChatContext, ChatMessage
from models.session_models import ChatSession
from widgets.api_client import ApiClientError, EditZenApiClient

LOGGER = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, I encountered an error. Please try again."
CONNECTION_REPLY = "Sorry, I couldn't connect. Please try again."
GREETING = "Hi! I'm your AI assistant. How can I help you edit your images?"
QUICK_ACTIONS: Tuple[str, ...] = (
    "How do I remove an object?",
    "What is generative fill?",
    "How to change colors?",
)


class ChatState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting-response"


@dataclass(frozen=True)
class ChatView:
    """Render state of the widget."""

    is_open: bool
    messages: Tuple[ChatMessage, ...]
    is_loading: bool
    greeting: Optional[str]
    quick_actions: Tuple[str, ...]
    input_value: str
    can_submit: bool


class ChatWidget:
    """Own the conversation of one open chat widget.

    The session lives as long as the widget. `close` discards it; a reply
    that arrives afterwards is dropped.
    """

    def __init__(self, api: EditZenApiClient, context: Optional[ChatContext] = None) -> None:
        self.api = api
        self.context = context
        self.session = ChatSession()
        self.state = ChatState.IDLE
        self.input_value = ""
        self.is_open = False

    @property
    def is_loading(self) -> bool:
        return self.state is ChatState.AWAITING_RESPONSE

    def toggle(self) -> None:
        self.is_open = not self.is_open

    def set_input(self, text: str) -> None:
        self.input_value = text

    def set_context(self, context: Optional[ChatContext]) -> None:
        self.context = context

    async def submit(self) -> Optional[ChatMessage]:
        """Send whatever is in the input box."""
        return await self.send_message(self.input_value)

    async def choose_quick_action(self, index: int) -> Optional[ChatMessage]:
        return await self.send_message(QUICK_ACTIONS[index])

    async def send_message(self, content: str) -> Optional[ChatMessage]:
        """Append the user's message, ask the assistant and append its reply.

        Returns the assistant message, or None when the submission was ignored
        (blank text, a request already in flight, or the widget closed
        before the reply arrived).
        """
        text = content.strip()
        if not text or self.is_loading:
            return None

        session = self.session
        session.append("user", text)
        self.input_value = ""
        self.state = ChatState.AWAITING_RESPONSE
        try:
            reply = await self._request_reply(session)
        finally:
            if session is self.session:
                self.state = ChatState.IDLE

        if session is not self.session:
            LOGGER.debug("Chat widget closed before the reply arrived")
            return None
        return session.add(reply)

    async def _request_reply(self, session: ChatSession) -> ChatMessage:
        context = self.context.model_dump(by_alias=True, exclude_none=True) if self.context else None
        try:
            result = await self.api.chat(session.history_payload(), context)
        except (httpx.HTTPError, ApiClientError) as exc:
            LOGGER.warning("Chat request failed: %s", exc)
            return ChatMessage(role="assistant", content=CONNECTION_REPLY)

        if result.get("success"):
            try:
                return ChatMessage.model_validate(result.get("data"))
            except PydanticValidationError:
                LOGGER.warning("Chat reply had an unexpected shape: %r", result.get("data"))
        return ChatMessage(role="assistant", content=ERROR_REPLY)

    def close(self) -> None:
        """Discard the conversation; the widget starts over with a new session."""
        self.session = ChatSession()
        self.state = ChatState.IDLE
        self.input_value = ""
        self.is_open = False

    def view(self) -> ChatView:
        empty = len(self.session) == 0
        return ChatView(
            is_open=self.is_open,
            messages=tuple(self.session.messages),
            is_loading=self.is_loading,
            greeting=GREETING if empty else None,
            quick_actions=QUICK_ACTIONS if empty else (),
            input_value=self.input_value,
            can_submit=not self.is_loading and bool(self.input_value.strip()),
        )
