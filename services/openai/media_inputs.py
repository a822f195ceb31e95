"""Utilities to build input payloads for the Responses API."""

import base64
from typing import Any, Dict, List, Sequence

from models.ai_models import ChatMessage


def to_image_data_url(image_bytes: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode raw image bytes into a data URL suitable for vision input."""
    if not image_bytes:
        raise ValueError("Image bytes are required.")
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def build_image_inputs(prompt: str, image_bytes: bytes, mime_type: str) -> List[Dict[str, Any]]:
    """Return a single user message holding the instruction and the image."""
    return [
        {
            "type": "message",
            "role": "user",
            "content": [
                {"type": "input_text", "text": prompt},
                {"type": "input_image", "image_url": to_image_data_url(image_bytes, mime_type)},
            ],
        }
    ]


def _turn(role: str, text: str) -> Dict[str, Any]:
    return {"type": "message", "role": role, "content": text}


def build_chat_inputs(
    system_prompt: str,
    acknowledgement: str,
    messages: Sequence[ChatMessage],
) -> List[Dict[str, Any]]:
    """Seed the conversation and replay the history ending with the live turn.

    The instruction goes in as a user turn followed by a canned assistant
    acknowledgement. Every message except the last is replayed as history and
    the last one is sent as the live user turn.
    """
    if not messages:
        raise ValueError("At least one message is required.")
    inputs: List[Dict[str, Any]] = [
        _turn("user", system_prompt),
        _turn("assistant", acknowledgement),
    ]
    inputs.extend(_turn(msg.role, msg.content) for msg in messages[:-1])
    inputs.append(_turn("user", messages[-1].content))
    return inputs
