"""FastAPI routes for the AI assistant."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Request

from controllers.ai_controller import AIController

router = APIRouter(prefix="/api/ai", tags=["ai"])
controller = AIController()


def _get_assistant(request: Request):
    """Retrieve the shared assistant service from the app state."""
    assistant = getattr(request.app.state, "assistant", None)
    if assistant is None:
        raise HTTPException(status_code=500, detail="Assistant service not initialized.")
    return assistant


@router.post("/chat", summary="Chat with the editing assistant")
async def chat(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)):
    """Return the assistant's reply to the submitted conversation."""
    return await controller.chat(payload or {}, service=_get_assistant(request))


@router.post("/analyze", summary="Describe an image and suggest edits")
async def analyze(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)):
    """Return the scene analysis for an image URL."""
    return await controller.analyze(payload or {}, service=_get_assistant(request))


@router.post("/suggest", summary="Suggest remove or recolor prompts")
async def suggest(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)):
    """Return prompt suggestions for the remove or recolor tools."""
    return await controller.suggest(payload or {}, service=_get_assistant(request))
