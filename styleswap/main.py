"""Main FastAPI application entry point."""

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from . import __version__
from .api import health, sessions
from .core import SessionStore
from .providers import GeminiImageClient
from .utils.config import Config, load_config
from .utils.logger import get_logger

logger = get_logger(__name__)

INDEX_PAGE = Path(__file__).parent / "static" / "index.html"


def create_app(
    config: Optional[Config] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        config: Preloaded configuration; loaded from the environment at
            startup when omitted
        transport: Optional httpx transport for the Gemini client
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the Gemini client and session store; close the client on shutdown."""
        logger.info("Application starting up...")

        try:
            app_config = config or load_config()

            gemini = GeminiImageClient(
                api_key=app_config.gemini_api_key,
                base_url=app_config.gemini_base_url,
                model=app_config.gemini_model,
                api_version=app_config.gemini_api_version,
                timeout=app_config.gemini_timeout_seconds,
                transport=transport,
                default_mime_type=app_config.default_mime_type,
            )
            await gemini.initialize()

            app.state.config = app_config
            app.state.gemini = gemini
            app.state.sessions = SessionStore(
                client=gemini,
                suggestions=app_config.suggestions,
                download_prefix=app_config.download_prefix,
                ttl_seconds=app_config.session_ttl_seconds,
                max_sessions=app_config.max_sessions,
            )

        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise

        logger.info("Application startup complete")

        yield

        logger.info("Application shutting down...")
        await gemini.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="StyleSwap",
        description="Describe a change, get an edited photo back",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(sessions.router, prefix="/api", tags=["sessions"])

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """The single page."""
        return INDEX_PAGE.read_text(encoding="utf-8")

    return app


app = create_app()


def main():
    import uvicorn

    port = int(os.getenv("PORT", 8000))

    uvicorn.run(
        "styleswap.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("APP_ENV", "development") == "development",
        log_level="info",
    )


if __name__ == "__main__":
    main()
