"""FastAPI application initialization and configuration."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vault_llm import __version__
from vault_llm.api.routes import (
    catalog_router,
    config_router,
    health_router,
    notes_router,
    query_router,
)
from vault_llm.config.settings import Settings, get_settings
from vault_llm.pipeline.factory import create_assistant
from vault_llm.providers.transport import HttpTransport

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, transport: HttpTransport | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Process settings, read from the environment when omitted
        transport: HTTP transport for provider calls, aiohttp when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for FastAPI app.

        Loads the configuration record and builds the assistant on startup.
        """
        logger.info("Starting up Vault LLM Assistant API...")

        app_settings = settings or get_settings()
        assistant = await create_assistant(app_settings, transport=transport)

        app.state.settings = app_settings
        app.state.assistant = assistant
        app.state.config_manager = assistant.config_manager

        logger.info("Vault LLM Assistant API started successfully", vault_dir=app_settings.vault_dir)

        yield

        logger.info("Vault LLM Assistant API shutdown complete")

    app = FastAPI(
        title="Vault LLM Assistant API",
        description="Question answering and note generation over a markdown vault",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(config_router)
    app.include_router(catalog_router)
    app.include_router(query_router)
    app.include_router(notes_router)

    logger.info("FastAPI app created")

    return app


# Create app instance
app = create_app()
