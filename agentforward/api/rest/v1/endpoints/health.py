"""
Health Check Endpoints
Service liveness and Redis reachability.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request
import structlog

from agentforward import __version__
from agentforward.core.errors import StorageError

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("")
async def health_check():
    """
    Basic health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "agentforward-api",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe: the API is ready once Redis answers."""
    redis_client = getattr(request.app.state, "redis", None)

    ready = False
    if redis_client is not None:
        try:
            await redis_client.connect()
            ready = True
        except StorageError as e:
            logger.warning("readiness_check_failed", error=str(e))

    return {
        "ready": ready,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
