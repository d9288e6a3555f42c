"""
Config Store
Key-value document store for per-agent configuration documents.
"""

import json
from typing import Optional

import structlog

from agentforward.infrastructure.persistence.redis_client import RedisClient

logger = structlog.get_logger(__name__)


class ConfigStore:
    """Stores one JSON document per (key, agent) pair."""

    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    @staticmethod
    def _key(key: str, agent_id: str) -> str:
        return f"config:{key}:{agent_id}"

    async def load_config(self, key: str, agent_id: str) -> Optional[dict]:
        """
        Load a document.

        Returns:
            The stored document, or None if the agent has none yet
        """
        raw = await self.redis.get(self._key(key, agent_id))
        if raw is None:
            return None
        return json.loads(raw)

    async def save_config(self, key: str, document: dict, agent_id: str) -> None:
        """Overwrite the stored document (last writer wins)."""
        await self.redis.set(self._key(key, agent_id), json.dumps(document))
        logger.debug("config_saved", key=key, agent_id=agent_id)
