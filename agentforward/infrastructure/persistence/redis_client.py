"""
Redis Client
Async Redis connection backing the document, cache, directory and traffic
stores.
"""

from typing import Any, Optional
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis.asyncio import ConnectionPool
from redis.exceptions import RedisError, WatchError
import structlog

from agentforward.config import RedisSettings
from agentforward.core.errors import StorageError

logger = structlog.get_logger(__name__)


class RedisClient:
    """
    Async Redis client.

    Supports:
    - Key-value storage for documents and records
    - Hash fields for cycle snapshots
    - Lists for append-only traffic and agent task queues
    - Pub/Sub for config change notifications

    Every Redis failure is re-raised as ``StorageError``.
    """

    def __init__(
        self,
        settings: Optional[RedisSettings] = None,
        client: Optional[redis.Redis] = None,
    ):
        self.settings = settings or RedisSettings()

        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = client

    async def connect(self) -> None:
        """Establish connection to Redis."""
        if self._client is None:
            self._pool = ConnectionPool(
                host=self.settings.host,
                port=self.settings.port,
                password=self.settings.password,
                db=self.settings.db,
                decode_responses=True,
                max_connections=self.settings.max_connections,
            )
            logger.info(
                "connecting_to_redis",
                host=self.settings.host,
                port=self.settings.port,
            )
            self._client = redis.Redis(connection_pool=self._pool)

        try:
            await self._client.ping()
        except RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            raise StorageError("Redis unavailable", error=str(e)) from e
        logger.info("redis_connected")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
        if self._pool:
            await self._pool.disconnect()
            self._pool = None
        logger.info("redis_disconnected")

    @asynccontextmanager
    async def get_connection(self):
        """Context manager for Redis connection."""
        if not self._client:
            await self.connect()
        try:
            yield self._client
        except RedisError as e:
            logger.error("redis_operation_failed", error=str(e))
            raise StorageError("Redis operation failed", error=str(e)) from e

    # =========================================================================
    # Key-Value Operations
    # =========================================================================

    async def get(self, key: str) -> Optional[str]:
        """Get value by key."""
        async with self.get_connection() as client:
            return await client.get(key)

    async def set(self, key: str, value: Any) -> bool:
        """Set key-value."""
        async with self.get_connection() as client:
            return await client.set(key, value)

    async def delete(self, *keys: str) -> int:
        """Delete one or more keys."""
        async with self.get_connection() as client:
            return await client.delete(*keys)

    # =========================================================================
    # Hash Operations
    # =========================================================================

    async def hget(self, name: str, key: str) -> Optional[str]:
        """Get hash field value."""
        async with self.get_connection() as client:
            return await client.hget(name, key)

    async def hset(
        self,
        name: str,
        key: Optional[str] = None,
        value: Any = None,
        mapping: Optional[dict] = None,
    ) -> int:
        """Set one hash field, or several via mapping."""
        async with self.get_connection() as client:
            return await client.hset(name, key, value, mapping=mapping)

    async def hgetall(self, name: str) -> dict:
        """Get all hash fields and values."""
        async with self.get_connection() as client:
            return await client.hgetall(name)

    async def hset_if_exists(self, name: str, mapping: dict) -> bool:
        """
        Set hash fields only if the hash still exists.

        Runs as a WATCH/MULTI transaction so a concurrent delete is never
        undone by the write.

        Returns:
            False if the hash was missing
        """
        async with self.get_connection() as client:
            while True:
                async with client.pipeline(transaction=True) as pipe:
                    try:
                        await pipe.watch(name)
                        if not await pipe.exists(name):
                            return False
                        pipe.multi()
                        pipe.hset(name, mapping=mapping)
                        await pipe.execute()
                        return True
                    except WatchError:
                        logger.debug("redis_watch_retry", key=name)
                        continue

    # =========================================================================
    # List Operations
    # =========================================================================

    async def rpush(self, key: str, *values: Any) -> int:
        """Push values to list tail."""
        async with self.get_connection() as client:
            return await client.rpush(key, *values)

    async def ltrim(self, key: str, start: int, end: int) -> bool:
        """Trim list to the given range."""
        async with self.get_connection() as client:
            return await client.ltrim(key, start, end)

    async def lrange(self, key: str, start: int, end: int) -> list:
        """Get list range."""
        async with self.get_connection() as client:
            return await client.lrange(key, start, end)

    # =========================================================================
    # Pub/Sub Operations
    # =========================================================================

    async def publish(self, channel: str, message: str) -> int:
        """Publish message to channel."""
        async with self.get_connection() as client:
            return await client.publish(channel, message)


# Singleton instance
_redis_client: Optional[RedisClient] = None


def get_redis_client(settings: Optional[RedisSettings] = None) -> RedisClient:
    """Get or create Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient(settings=settings)
    return _redis_client


async def init_redis(settings: Optional[RedisSettings] = None) -> RedisClient:
    """Initialize Redis client and establish connection."""
    client = get_redis_client(settings)
    await client.connect()
    return client


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client
    if _redis_client:
        await _redis_client.disconnect()
        _redis_client = None
