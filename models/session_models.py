"""Conversation state owned by a single open chat widget."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from models.ai_models import ChatMessage


@dataclass
class ChatSession:
	"""Ordered conversation for one widget instance.

	Insertion order is the history replayed to the model. A session is never
	shared between widgets and is dropped when its widget closes.
	"""

	messages: List[ChatMessage] = field(default_factory=list)

	def append(self, role: str, content: str) -> ChatMessage:
		"""Create a message and append it to the conversation."""
		message = ChatMessage(role=role, content=content)
		self.messages.append(message)
		return message

	def add(self, message: ChatMessage) -> ChatMessage:
		self.messages.append(message)
		return message

	def history_payload(self) -> List[Dict[str, Any]]:
		"""Return the conversation serialized for the chat endpoint."""
		return [msg.model_dump(mode="json") for msg in self.messages]

	def __len__(self) -> int:
		return len(self.messages)
