"""
FastAPI Application
Admin and observer callback API for AgentForward.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from agentforward import __version__
from agentforward.api.rest.dependencies import build_services
from agentforward.api.rest.v1.router import api_router
from agentforward.config import Settings, get_settings
from agentforward.core.errors import AgentForwardError, StorageError
from agentforward.infrastructure.persistence import (
    RedisClient,
    close_redis,
    get_redis_client,
    init_redis,
)

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    redis_client: Optional[RedisClient] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the cached environment settings
        redis_client: Pre-built Redis client; the app then leaves its
            lifecycle to the caller
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        logger.info("starting_agentforward_api", env=settings.app.env)

        client = redis_client
        if client is None:
            try:
                client = await init_redis(settings.redis)
            except StorageError as e:
                # Stores reconnect lazily on first use
                logger.warning("redis_connection_failed", error=str(e))
                client = get_redis_client(settings.redis)

        app.state.redis = client
        app.state.services = build_services(client, settings)

        yield

        logger.info("shutting_down_agentforward_api")
        if redis_client is None:
            await close_redis()

    app = FastAPI(
        title="AgentForward API",
        description="Per-agent proxy forward compiler and traffic accounting",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app.name,
            "version": __version__,
            "status": "running",
            "docs": "/api/docs",
        }

    @app.exception_handler(AgentForwardError)
    async def agentforward_exception_handler(request: Request, exc: AgentForwardError):
        logger.warning(
            "request_failed",
            path=request.url.path,
            error=exc.code,
            detail=exc.message,
            context=exc.context,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app
