"""Optional Redis-backed key-value cache. Absent (None) when REDIS_URL is not configured."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from crudkit.core.errors import CacheError

if TYPE_CHECKING:
    from crudkit.core.config import Settings

logger = logging.getLogger(__name__)


class Cache:
    """
    Thin async get/set/delete over a shared redis client.

    The client owns its connection pool and is safe for concurrent use; expiry
    and eviction are left to Redis. Redis failures surface as CacheError.
    """

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key does not exist."""
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise CacheError(f"Could not send GET command to Redis for {key!r}") from e

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheError(f"Could not send SET command to Redis for {key!r}") from e

    async def delete(self, key: str) -> bool:
        """Remove the key; return True if it existed."""
        try:
            removed = await self._client.delete(key)
        except RedisError as e:
            raise CacheError(f"Could not send DEL command to Redis for {key!r}") from e
        return bool(removed)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()


def build_cache(settings: Settings) -> Cache | None:
    """Create the cache if REDIS_URL is set; otherwise the cache layer is disabled."""
    if not settings.cache_enabled:
        logger.info("REDIS_URL not configured; cache layer disabled")
        return None
    client = aioredis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        health_check_interval=30,
    )
    logger.info("Redis cache enabled")
    return Cache(client)
