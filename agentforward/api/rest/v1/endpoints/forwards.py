"""
Forwards Endpoints
Forward lifecycle and traffic history.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
import structlog

from agentforward.api.rest.dependencies import Services, get_services
from agentforward.domain.entities import Forward, ForwardOptions

router = APIRouter()
logger = structlog.get_logger(__name__)


class ForwardOptionsInput(BaseModel):
    """Input model for forwarding options."""

    channel: Optional[str] = None
    listen: Optional[str] = None
    forward: str = "tcp"


class ForwardInput(BaseModel):
    """Input model for creating a forward."""

    agent_id: str
    target: str
    target_port: int = Field(ge=1, le=65535)
    agent_port: int = Field(default=0, ge=0, le=65535)
    options: ForwardOptionsInput = Field(default_factory=ForwardOptionsInput)


class PortInput(BaseModel):
    """Input model for an allocated agent port."""

    agent_port: int = Field(ge=1, le=65535)


@router.post("", status_code=201)
async def create_forward(
    body: ForwardInput,
    services: Services = Depends(get_services),
):
    """
    Create a forward and compile it into its agent's config.

    Returns:
        The stored forward
    """
    forward = Forward.create(
        agent_id=body.agent_id,
        target=body.target,
        target_port=body.target_port,
        agent_port=body.agent_port,
        options=ForwardOptions(**body.options.model_dump()),
    )
    await services.config_service.create_forward(forward)
    return forward.to_dict()


@router.get("/{forward_id}")
async def get_forward(
    forward_id: str,
    services: Services = Depends(get_services),
):
    """Get forward by ID."""
    forward = await services.forwards.get_forward_must(forward_id)
    return forward.to_dict()


@router.delete("/{forward_id}")
async def delete_forward(
    forward_id: str,
    services: Services = Depends(get_services),
):
    """Delete a forward and remove it from its agent's config."""
    await services.config_service.delete_forward(forward_id)
    return {"deleted": forward_id}


@router.put("/{forward_id}/port")
async def allocate_port(
    forward_id: str,
    body: PortInput,
    services: Services = Depends(get_services),
):
    """Record the port the agent allocated for this forward."""
    await services.config_service.allocate_port(forward_id, body.agent_port)
    forward = await services.forwards.get_forward_must(forward_id)
    return forward.to_dict()


@router.get("/{forward_id}/traffic")
async def list_forward_traffic(
    forward_id: str,
    limit: int = Query(100, ge=1, le=1000),
    services: Services = Depends(get_services),
):
    """
    List traffic records for a forward.

    Args:
        limit: Maximum records to return (most recent)

    Returns:
        Traffic deltas, oldest first
    """
    await services.forwards.get_forward_must(forward_id)
    records = await services.traffic.list_forward_traffic(forward_id, limit=limit)
    return {
        "traffic": [r.to_dict() for r in records],
        "count": len(records),
    }
