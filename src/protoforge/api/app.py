"""FastAPI application factory for Protoforge."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from protoforge import __version__
from protoforge.api.deps import init_container, reset_container
from protoforge.api.middleware import (
    RequestBodyLimitMiddleware,
    RequestTimingMiddleware,
    SecurityHeadersMiddleware,
)
from protoforge.api.routers import artifacts, messages, projects, teams
from protoforge.api.schemas import HealthResponse
from protoforge.service.container import ServiceContainer
from protoforge.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the ServiceContainer for the lifetime of the application."""
    settings: Settings = app.state.settings
    init_container(ServiceContainer.in_memory(settings))
    try:
        yield
    finally:
        reset_container()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Protoforge",
        description="Versioned storage for AI-generated web prototypes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(
        RequestBodyLimitMiddleware,
        max_content=settings.max_body_bytes_content,
        max_other=settings.max_body_bytes_default,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(artifacts.router, prefix="/artifacts", tags=["artifacts"])
    app.include_router(messages.router, prefix="/artifacts", tags=["messages"])
    app.include_router(projects.router, prefix="/projects", tags=["projects"])
    app.include_router(teams.router, prefix="/teams", tags=["teams"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("protoforge.api")
    logger.info(
        "Protoforge API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "protoforge.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
