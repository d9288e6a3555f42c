"""
Traffic Store
Append-only storage of per-forward traffic deltas.
"""

import json
from typing import Sequence

import structlog

from agentforward.domain.entities import TrafficRecord
from agentforward.infrastructure.persistence.redis_client import RedisClient

logger = structlog.get_logger(__name__)


class TrafficStore:
    """Traffic records kept in one Redis list per forward."""

    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    @staticmethod
    def _key(forward_id: str) -> str:
        return f"forward_traffic:{forward_id}"

    async def save_forward_traffic(
        self,
        forward_id: str,
        traffics: Sequence[TrafficRecord],
    ) -> int:
        """
        Append a batch of records for one forward in a single call.

        Returns:
            Length of the forward's traffic list after the append
        """
        if not traffics:
            return 0
        length = await self.redis.rpush(
            self._key(forward_id),
            *(json.dumps(t.to_dict()) for t in traffics),
        )
        logger.debug("forward_traffic_saved", forward_id=forward_id, count=len(traffics))
        return length

    async def list_forward_traffic(
        self,
        forward_id: str,
        limit: int = 100,
    ) -> list[TrafficRecord]:
        """Get the most recent records for a forward, oldest first."""
        raw = await self.redis.lrange(self._key(forward_id), -limit, -1)
        return [TrafficRecord.from_dict(json.loads(item)) for item in raw]
