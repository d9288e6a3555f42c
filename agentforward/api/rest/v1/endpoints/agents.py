"""
Agents Endpoints
Agent registration, observer installation and the observer callback.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
import structlog

from agentforward.api.rest.dependencies import Services, get_services
from agentforward.domain.entities import Agent, ConnectConfig
from agentforward.infrastructure.security import generate_secret
from agentforward.telemetry import ObserverBatch

router = APIRouter()
logger = structlog.get_logger(__name__)


class AgentInput(BaseModel):
    """Input model for registering an agent."""

    name: Optional[str] = None
    secret: Optional[str] = Field(default=None, min_length=16)


@router.post("/observer")
async def observer_callback(
    batch: ObserverBatch,
    sign: Optional[str] = Query(None, description="Callback signature"),
    services: Services = Depends(get_services),
):
    """
    Receive a telemetry batch from the proxy engine.

    Returns:
        ``{"success": true}`` when every event was applied
    """
    return await services.reconciler.handle(batch, sign)


@router.put("/{agent_id}")
async def register_agent(
    agent_id: str,
    body: AgentInput,
    services: Services = Depends(get_services),
):
    """
    Register or update an agent.

    A secret is generated when none is supplied.
    """
    agent = Agent(
        id=agent_id,
        name=body.name,
        connect_config=ConnectConfig(secret=body.secret or generate_secret()),
    )
    await services.agents.save_agent(agent)
    return agent.to_dict()


@router.post("/{agent_id}/observer")
async def install_observer(
    agent_id: str,
    services: Services = Depends(get_services),
):
    """Install the signed observer and push the config to the agent."""
    document = await services.config_service.set_observer(agent_id)
    return {"agent_id": agent_id, "config": document.to_dict()}


@router.get("/{agent_id}/config")
async def get_agent_config(
    agent_id: str,
    services: Services = Depends(get_services),
):
    """Get the agent's compiled proxy config."""
    document = await services.config_service.get_config(agent_id)
    return document.to_dict()


@router.get("/{agent_id}/tasks")
async def list_agent_tasks(
    agent_id: str,
    limit: int = Query(50, ge=1, le=500),
    services: Services = Depends(get_services),
):
    """List config tasks queued for the agent."""
    await services.agents.get_agent_must(agent_id)
    tasks = await services.distributor.pending_tasks(agent_id, limit=limit)
    return {"tasks": tasks, "count": len(tasks)}
