import inspect
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables before modules read their defaults

from fastapi import FastAPI, Request

from routes.session_route import router as session_router
from services.gemini.model_client import GeminiModelClient
from services.generation.model_client import ModelClient, UnconfiguredModelClient
from services.openai.image_edit_client import OpenAIImageEditClient
from services.session_store import SessionStore

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
LOGGER = logging.getLogger(__name__)


def build_model_client(provider: Optional[str] = None) -> ModelClient:
    """
    Build the model client for the configured IMAGE_PROVIDER.

    A missing credential does not stop startup; every generation attempt
    then fails with a readable message instead.
    """
    provider = (provider or os.getenv("IMAGE_PROVIDER", "gemini")).strip().lower()

    if provider == "gemini":
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            LOGGER.warning("GEMINI_API_KEY is not set; image generation will fail")
            return UnconfiguredModelClient("gemini", "GEMINI_API_KEY environment variable is not set")
        return GeminiModelClient(api_key=api_key)

    if provider == "openai":
        if not os.getenv("OPENAI_API_KEY"):
            LOGGER.warning("OPENAI_API_KEY is not set; image generation will fail")
            return UnconfiguredModelClient("openai", "OPENAI_API_KEY environment variable is not set")
        return OpenAIImageEditClient()

    raise RuntimeError(f"Unknown IMAGE_PROVIDER: {provider}")


def create_app(model_client: Optional[ModelClient] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        model_client: Optional client to use instead of the one configured
            from the environment (used by tests).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize the model client and the in-memory
        session store and attach them to `app.state`.
        """
        client = model_client or build_model_client()
        app.state.model_client = client
        app.state.session_store = SessionStore(client)
        LOGGER.info("Image provider: %s", client.name)

        try:
            yield
        finally:
            # Gracefully close the model client if it exposes a close/aclose method.
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:
                    LOGGER.warning("Error while closing model client: %s", exc)

    app = FastAPI(title="Image Edit Studio", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting the active image provider.
        """
        client = getattr(request.app.state, "model_client", None)
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "provider": getattr(client, "name", None),
            "configured": client is not None and not isinstance(client, UnconfiguredModelClient),
            "sessions": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(session_router)

    return app


app = create_app()
