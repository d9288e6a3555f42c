"""
Config Distributor
Persists compiled documents and notifies agents that their config changed.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import structlog

from agentforward.infrastructure.persistence import ConfigStore, RedisClient
from agentforward.proxy.document import ProxyConfigDocument

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_KEY = "AGENT_GOST_CONFIG"
DEFAULT_TASK_QUEUE_LIMIT = 100


@dataclass
class AgentTask:
    """Task delivered to an agent over its task queue."""

    type: str
    key: str
    value: str
    id: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "created_at": self.created_at.isoformat(),
        }


class ConfigDistributor:
    """
    Stores per-agent documents and enqueues config change tasks.

    Delivery of the enqueued task (ordering, redelivery) belongs to whatever
    drains ``agent_tasks:<agent_id>``. The queue keeps only the newest
    ``task_queue_limit`` tasks; each config_change carries the full
    document, so older ones are superseded.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        redis_client: RedisClient,
        config_key: str = DEFAULT_CONFIG_KEY,
        task_queue_limit: int = DEFAULT_TASK_QUEUE_LIMIT,
    ):
        self.config_store = config_store
        self.redis = redis_client
        self.config_key = config_key
        self.task_queue_limit = task_queue_limit

    @staticmethod
    def task_queue(agent_id: str) -> str:
        return f"agent_tasks:{agent_id}"

    async def load(self, agent_id: str) -> ProxyConfigDocument:
        """Load an agent's document, empty if it has none yet."""
        data = await self.config_store.load_config(self.config_key, agent_id)
        return ProxyConfigDocument.from_dict(data)

    async def persist(self, agent_id: str, document: ProxyConfigDocument) -> None:
        await self.config_store.save_config(
            self.config_key,
            document.to_dict(),
            agent_id,
        )

    async def notify_config_changed(
        self,
        agent_id: str,
        document: ProxyConfigDocument,
    ) -> AgentTask:
        """Enqueue a config_change task carrying the full document."""
        task = AgentTask(
            type="config_change",
            key=self.config_key,
            value=document.to_json(),
        )
        message = json.dumps(task.to_dict())
        queue = self.task_queue(agent_id)

        await self.redis.rpush(queue, message)
        await self.redis.ltrim(queue, -self.task_queue_limit, -1)
        await self.redis.publish(queue, message)

        logger.info("config_change_distributed", agent_id=agent_id, key=self.config_key)
        return task

    async def pending_tasks(self, agent_id: str, limit: Optional[int] = None) -> list[dict]:
        """Read queued tasks for an agent without consuming them."""
        end = -1 if limit is None else limit - 1
        raw = await self.redis.lrange(self.task_queue(agent_id), 0, end)
        return [json.loads(item) for item in raw]
