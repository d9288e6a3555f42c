"""REST API - FastAPI application and routes."""

from agentforward.api.rest.app import create_app

__all__ = ["create_app"]
