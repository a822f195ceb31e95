import inspect
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from starlette.exceptions import HTTPException as StarletteHTTPException

from routes.ai_route import router as ai_router
from services.image_fetcher import ImageFetcher
from services.openai.editing_assistant import EditingAssistantService
from utils.settings import Settings, load_settings

LOGGER = logging.getLogger(__name__)


def _build_openai_client(settings: Settings) -> Optional[AsyncOpenAI]:
    """Create the OpenAI client, or None when no credential is configured."""
    if not settings.has_credentials:
        LOGGER.warning("OPENAI_API_KEY is not set; AI endpoints will fail until it is configured.")
        return None
    try:
        return AsyncOpenAI(api_key=settings.openai_api_key)
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the OpenAI async client (None without a credential)
      - the image fetcher and the assistant service
    and attach them to `app.state`. Services injected through `create_app`
    are left untouched.
    """
    settings: Settings = app.state.settings
    owned = []

    if getattr(app.state, "assistant", None) is None:
        openai_client = _build_openai_client(settings)
        fetcher = ImageFetcher(timeout=settings.image_fetch_timeout)
        app.state.openai_client = openai_client
        app.state.assistant = EditingAssistantService(openai_client, fetcher, model=settings.openai_model)
        owned = [fetcher, openai_client]

    try:
        yield
    finally:
        # Gracefully close the clients we created; shutdown errors are only logged.
        for resource in owned:
            if resource is None:
                continue
            aclose = getattr(resource, "aclose", None) or getattr(resource, "close", None)
            if aclose is None:
                continue
            try:
                result = aclose()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                LOGGER.warning("Error while closing %s", type(resource).__name__, exc_info=True)


def create_app(
    settings: Optional[Settings] = None,
    assistant: Optional[EditingAssistantService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="EditZen AI", lifespan=lifespan)
    app.state.settings = settings
    app.state.assistant = assistant

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_: Request, exc: StarletteHTTPException):
        """Render every HTTP error as `{"error": message}`."""
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def body_error(_: Request, exc: RequestValidationError):
        LOGGER.info("Rejected request body: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports whether the model backend is usable.
        """
        service = getattr(request.app.state, "assistant", None)
        return {"ok": True, "openai_available": service is not None and service.client is not None}

    app.include_router(ai_router)

    return app


app = create_app()
