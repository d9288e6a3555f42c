"""Infrastructure Persistence - Redis-backed stores."""

from agentforward.infrastructure.persistence.redis_client import (
    RedisClient,
    get_redis_client,
    init_redis,
    close_redis,
)
from agentforward.infrastructure.persistence.config_store import ConfigStore
from agentforward.infrastructure.persistence.forward_repository import (
    ForwardRepository,
    AgentRepository,
)
from agentforward.infrastructure.persistence.traffic_store import TrafficStore

__all__ = [
    "RedisClient",
    "get_redis_client",
    "init_redis",
    "close_redis",
    "ConfigStore",
    "ForwardRepository",
    "AgentRepository",
    "TrafficStore",
]
