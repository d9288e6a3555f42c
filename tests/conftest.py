"""Shared pytest fixtures for AgentForward tests."""

from datetime import datetime, timedelta, timezone

import fakeredis
import fakeredis.aioredis
import pytest

from agentforward.core.locks import KeyedLock
from agentforward.domain.entities import Agent, ConnectConfig, Forward, ForwardOptions
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

AGENT_ID = "agent-1"
AGENT_SECRET = "s3cr3t-s3cr3t-s3cr3t"


class Clock:
    """Settable clock for the reconciler."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_forward(
    forward_id: str = "f1",
    agent_id: str = AGENT_ID,
    target: str = "10.0.0.5",
    target_port: int = 8080,
    agent_port: int = 0,
    forward: str = "tcp",
    listen: str = "tcp",
    channel: str = None,
    updated_at: datetime = None,
    **kwargs,
) -> Forward:
    updated_at = updated_at or datetime.now(timezone.utc) - timedelta(minutes=5)
    return Forward(
        id=forward_id,
        agent_id=agent_id,
        target=target,
        target_port=target_port,
        agent_port=agent_port,
        options=ForwardOptions(channel=channel, listen=listen, forward=forward),
        created_at=updated_at,
        updated_at=updated_at,
        **kwargs,
    )


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def redis_client():
    """RedisClient backed by an isolated in-memory fake server."""
    fake = fakeredis.aioredis.FakeRedis(
        server=fakeredis.FakeServer(),
        decode_responses=True,
    )
    return RedisClient(client=fake)


@pytest.fixture
def forwards(redis_client):
    return ForwardRepository(redis_client)


@pytest.fixture
def agents(redis_client):
    return AgentRepository(redis_client)


@pytest.fixture
def traffic_store(redis_client):
    return TrafficStore(redis_client)


@pytest.fixture
def cycle_cache(redis_client):
    return CycleCache(redis_client)


@pytest.fixture
def distributor(redis_client):
    return ConfigDistributor(ConfigStore(redis_client), redis_client)


@pytest.fixture
def signatures():
    return SignatureCodec()


@pytest.fixture
def agent():
    return Agent(id=AGENT_ID, name="edge-1", connect_config=ConnectConfig(secret=AGENT_SECRET))


@pytest.fixture
async def saved_agent(agents, agent):
    await agents.save_agent(agent)
    return agent


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def clock():
    return Clock(datetime.now(timezone.utc))


@pytest.fixture
def config_service(forwards, agents, distributor, signatures):
    return ForwardConfigService(
        forwards,
        agents,
        distributor,
        signatures=signatures,
        server_url="https://panel.example.com/",
        locks=KeyedLock(),
    )


@pytest.fixture
def reconciler(forwards, agents, cycle_cache, traffic_store, signatures, clock):
    return TelemetryReconciler(
        forwards,
        agents,
        cycle_cache,
        traffic_store,
        signatures=signatures,
        clock=clock,
    )


@pytest.fixture
def valid_sign(signatures):
    return signatures.sign(AGENT_SECRET, AGENT_ID)
