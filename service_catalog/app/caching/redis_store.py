"""
Redis-backed cache store.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.logging import get_logger
from shared.errors import CacheUnavailableError


class RedisCacheStore:
    """Cache store over a single Redis instance."""

    strategy_label = "Redis Only"

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None):
        self.redis_url = redis_url
        self.logger = get_logger("catalog.cache.redis")
        self.redis: Optional[redis.Redis] = client

    async def start(self):
        """Open the Redis connection and verify it answers."""
        if self.redis is None:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30
            )

        try:
            await self.redis.ping()
            self.logger.info("Connected to Redis", redis_url=self.redis_url)
        except (RedisError, OSError) as e:
            # The orchestrator fails open, so a cold Redis must not stop startup
            self.logger.error("Redis not reachable at startup", redis_url=self.redis_url, error=str(e))

    async def stop(self):
        """Close the Redis connection."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    def _client(self, operation: str) -> redis.Redis:
        if self.redis is None:
            raise CacheUnavailableError(operation, "Redis client not started")
        return self.redis

    async def get(self, key: str) -> Optional[str]:
        """Get a cached payload, ``None`` when absent or expired."""
        client = self._client("get")
        try:
            value = await client.get(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError("get", str(e), {"key": key}) from e

        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a payload that Redis expires after ``ttl_seconds``."""
        client = self._client("set")
        try:
            await client.setex(key, ttl_seconds, value)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError("set", str(e), {"key": key}) from e

        self.logger.debug("Cached value", key=key, ttl=ttl_seconds)

    async def ping(self) -> bool:
        """Check Redis health."""
        if self.redis is None:
            return False
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError):
            return False
