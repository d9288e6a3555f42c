"""
Cycle Cache
Snapshots of a forward's cumulative counters taken when its service
becomes ready, i.e. just before the engine's own counters restart at zero.
"""

import json
from dataclasses import dataclass
from typing import Optional

import structlog

from agentforward.infrastructure.persistence import RedisClient

logger = structlog.get_logger(__name__)

DEFAULT_BUCKET = "forward_gost_cycle_traffic"


@dataclass(frozen=True)
class CycleSnapshot:
    """Cumulative (download, upload) at the start of an engine cycle."""

    download: int = 0
    upload: int = 0

    def to_json(self) -> str:
        return json.dumps({"download": self.download, "upload": self.upload})

    @classmethod
    def from_json(cls, raw: str) -> "CycleSnapshot":
        data = json.loads(raw)
        return cls(download=int(data["download"]), upload=int(data["upload"]))


class CycleCache:
    """Hash of forward id -> CycleSnapshot, overwritten every cycle."""

    def __init__(self, redis_client: RedisClient, bucket: str = DEFAULT_BUCKET):
        self.redis = redis_client
        self.bucket = bucket

    async def get(self, forward_id: str) -> Optional[CycleSnapshot]:
        raw = await self.redis.hget(self.bucket, forward_id)
        if raw is None:
            return None
        return CycleSnapshot.from_json(raw)

    async def put(self, forward_id: str, snapshot: CycleSnapshot) -> None:
        await self.redis.hset(self.bucket, forward_id, snapshot.to_json())
        logger.debug(
            "cycle_snapshot_saved",
            forward_id=forward_id,
            download=snapshot.download,
            upload=snapshot.upload,
        )
