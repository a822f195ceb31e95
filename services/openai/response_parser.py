"""Helpers to pull text and structured data out of Responses API output.

Model replies are free text. Even when asked for JSON the model may wrap it
in prose or a code fence, so structured data is recovered in two steps:
`find_json_span` locates the first balanced `{...}` or `[...]` span and
`decode_json_span` decodes it. Callers decide what a missing span means.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from services.errors import ParseError

_CLOSERS = {"{": "}", "[": "]"}


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def extract_text(response: Any) -> str:
    """Return the concatenated `output_text` entries of a response."""
    chunks = []
    for item in _field(response, "output", None) or []:
        if _field(item, "type") != "message":
            continue
        for content in _field(item, "content", None) or []:
            if _field(content, "type") == "output_text":
                chunks.append(_field(content, "text", "") or "")
    if chunks:
        return "".join(chunks)
    return _field(response, "output_text", "") or ""


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage if present."""
    usage = _field(response, "usage", None)
    return {
        "input_tokens": _field(usage, "input_tokens", None) if usage else None,
        "output_tokens": _field(usage, "output_tokens", None) if usage else None,
    }


def find_json_span(text: str, opener: str) -> Optional[str]:
    """Return the first balanced span that starts with `opener`.

    Brackets inside JSON string literals are ignored. Returns None when the
    text has no `opener` or the span starting at the first one never closes.
    Later spans are never considered: in `"pick [2] of these: [...]"` the
    result is `"[2]"`.
    """
    if opener not in _CLOSERS:
        raise ValueError(f"Unsupported opener: {opener!r}")
    start = text.find(opener) if text else -1
    if start < 0:
        return None

    stack = []
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if not stack or stack[-1] != char:
                return None
            stack.pop()
            if not stack:
                return text[start : index + 1]
    return None


def decode_json_span(span: str) -> Any:
    """Decode a span located by `find_json_span`.

    Raises:
        ParseError: If the span is not valid JSON.
    """
    try:
        return json.loads(span)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Model output contained malformed JSON: {exc.msg}") from exc
