"""Process configuration read from the environment.

Values are resolved once at startup. `.env` files are honoured through
`python-dotenv`. A missing `OPENAI_API_KEY` is not fatal here: the assistant
service reports it as an upstream failure on each call instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gpt-5"
DEFAULT_FETCH_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the API server."""

    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_MODEL
    image_fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.openai_api_key)


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc


def load_settings() -> Settings:
    """Load settings from the environment (and `.env`, if present)."""
    load_dotenv()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
        image_fetch_timeout=_read_float("IMAGE_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
