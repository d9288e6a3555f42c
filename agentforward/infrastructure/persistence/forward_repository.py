"""
Forward and Agent Directories
Typed record access for forwards and agents.
"""

import json
from datetime import datetime
from typing import Optional

import structlog

from agentforward.core.errors import NotFound
from agentforward.domain.entities import Agent, Forward
from agentforward.infrastructure.persistence.redis_client import RedisClient

logger = structlog.get_logger(__name__)


class ForwardRepository:
    """
    Forward records stored as Redis hashes (``forward:<id>``).

    Counter and port updates write only their own fields so they do not
    clobber a concurrent administrative change to the same record, and
    only while the record exists so they never resurrect a deleted one.
    """

    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    @staticmethod
    def _key(forward_id: str) -> str:
        return f"forward:{forward_id}"

    async def get_forward(self, forward_id: str) -> Optional[Forward]:
        data = await self.redis.hgetall(self._key(forward_id))
        if not data or "id" not in data:
            return None
        data = dict(data)
        data["options"] = json.loads(data.get("options") or "{}")
        return Forward.from_dict(data)

    async def get_forward_must(self, forward_id: str) -> Forward:
        """
        Get a forward by id.

        Raises:
            NotFound: If the forward does not exist
        """
        forward = await self.get_forward(forward_id)
        if forward is None:
            raise NotFound("forward", forward_id)
        return forward

    async def save_forward(self, forward: Forward) -> None:
        record = forward.to_dict()
        record["options"] = json.dumps(record["options"])
        record = {k: v for k, v in record.items() if v is not None}
        await self.redis.hset(self._key(forward.id), mapping=record)

    async def update_counters(
        self,
        forward_id: str,
        download: int,
        upload: int,
        updated_at: datetime,
    ) -> None:
        """
        Persist new cumulative counters for a forward.

        Raises:
            NotFound: If the forward was deleted meanwhile
        """
        updated = await self.redis.hset_if_exists(
            self._key(forward_id),
            mapping={
                "download": download,
                "upload": upload,
                "used_traffic": download + upload,
                "updated_at": updated_at.isoformat(),
            },
        )
        if not updated:
            raise NotFound("forward", forward_id)

    async def update_agent_port(
        self,
        forward_id: str,
        agent_port: int,
        updated_at: datetime,
    ) -> None:
        updated = await self.redis.hset_if_exists(
            self._key(forward_id),
            mapping={
                "agent_port": agent_port,
                "updated_at": updated_at.isoformat(),
            },
        )
        if not updated:
            raise NotFound("forward", forward_id)

    async def delete_forward(self, forward_id: str) -> None:
        await self.redis.delete(self._key(forward_id))


class AgentRepository:
    """Agent records stored as JSON strings (``agent:<id>``)."""

    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    @staticmethod
    def _key(agent_id: str) -> str:
        return f"agent:{agent_id}"

    async def get_agent(self, agent_id: str) -> Optional[Agent]:
        raw = await self.redis.get(self._key(agent_id))
        if raw is None:
            return None
        return Agent.from_dict(json.loads(raw))

    async def get_agent_must(self, agent_id: str) -> Agent:
        """
        Get an agent by id.

        Raises:
            NotFound: If the agent does not exist
        """
        agent = await self.get_agent(agent_id)
        if agent is None:
            raise NotFound("agent", agent_id)
        return agent

    async def save_agent(self, agent: Agent) -> None:
        await self.redis.set(self._key(agent.id), json.dumps(agent.to_dict()))
        logger.info("agent_saved", agent_id=agent.id)
