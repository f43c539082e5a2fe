"""
FastAPI Application Factory & Configuration.

This module builds the WordCards HTTP surface:
1.  **Middleware Setup**: CORS so a browser front end can call the API.
2.  **Exception Handling**: Global handler so all errors return structured JSON.
3.  **Routing**: Flashcard job routes and a health probe.
4.  **Lifecycle**: Initializing the in-memory job store at startup.

`create_app` is a factory so tests can build isolated app instances.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wordcards import __version__
from wordcards.api.job_store import JobStore
from wordcards.api.routers import flashcards
from wordcards.core.settings import get_logger, load_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the job store singleton before the first request."""
    logger.info("WordCards API starting up")
    JobStore.get_instance()
    yield
    logger.info("WordCards API shutting down")


def create_app() -> FastAPI:
    """
    Construct and configure the WordCards FastAPI application.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="WordCards API",
        description="Illustrated Arabic/English flashcards from a word or category",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return unhandled exceptions as structured JSON instead of a 500 page."""
        logger.exception("unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    app.include_router(flashcards.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
