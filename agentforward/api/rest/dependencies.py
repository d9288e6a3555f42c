"""
API Dependencies
Wires stores and services together and exposes them to route handlers.
"""

from dataclasses import dataclass

from fastapi import HTTPException, Request

from agentforward.config import Settings
from agentforward.core.locks import KeyedLock
from agentforward.infrastructure.persistence import (
    AgentRepository,
    ConfigStore,
    ForwardRepository,
    RedisClient,
    TrafficStore,
)
from agentforward.infrastructure.security import SignatureCodec
from agentforward.proxy import ConfigDistributor, ForwardConfigService
from agentforward.telemetry import CycleCache, TelemetryReconciler


@dataclass
class Services:
    """Per-application service graph."""

    forwards: ForwardRepository
    agents: AgentRepository
    traffic: TrafficStore
    distributor: ConfigDistributor
    config_service: ForwardConfigService
    reconciler: TelemetryReconciler


def build_services(redis_client: RedisClient, settings: Settings) -> Services:
    """Build the service graph on top of one Redis client."""
    forwards = ForwardRepository(redis_client)
    agents = AgentRepository(redis_client)
    traffic = TrafficStore(redis_client)
    signatures = SignatureCodec()
    distributor = ConfigDistributor(
        ConfigStore(redis_client),
        redis_client,
        config_key=settings.proxy.config_key,
        task_queue_limit=settings.proxy.task_queue_limit,
    )

    return Services(
        forwards=forwards,
        agents=agents,
        traffic=traffic,
        distributor=distributor,
        config_service=ForwardConfigService(
            forwards,
            agents,
            distributor,
            signatures=signatures,
            server_url=settings.app.server_url,
            observer_path=settings.proxy.observer_path,
            observer_name=settings.proxy.observer_name,
            locks=KeyedLock(),
        ),
        reconciler=TelemetryReconciler(
            forwards,
            agents,
            CycleCache(redis_client, bucket=settings.proxy.cycle_traffic_bucket),
            traffic,
            signatures=signatures,
            locks=KeyedLock(),
        ),
    )


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=503, detail="Services not available")
    return services
