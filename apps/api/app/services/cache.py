"""
Redis cache service with JSON serialization and TTL support.

Caching is best-effort: when Redis is unreachable every call degrades to a
miss (get -> None, set -> False, invalidate -> 0) and callers recompute.

Usage:
    cache = CacheService()
    await cache.set("holidays:2026:PR", ["2026-01-01", ...], ttl=300)
    dates = await cache.get("holidays:2026:PR")  # list or None
    await cache.invalidate_pattern("holidays:*")
"""

import json
import logging
from typing import Any, Optional

from app.config import settings

logger = logging.getLogger(__name__)

_redis_client = None


async def get_redis():
    """Get or create a shared async Redis connection."""
    global _redis_client
    if _redis_client is None:
        try:
            from redis.asyncio import from_url
            _redis_client = from_url(
                settings.REDIS_URL,
                decode_responses=True,
                socket_connect_timeout=5,
            )
            await _redis_client.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except Exception as e:
            logger.warning("Redis unavailable, caching disabled: %s", e)
            _redis_client = None
    return _redis_client


async def close_redis():
    """Close the Redis connection (call on shutdown)."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


class CacheService:
    """Async Redis cache with namespace prefixes and JSON ser/de."""

    DEFAULT_TTL = 300  # 5min

    def __init__(self, prefix: str = "jrclaw") -> None:
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        """Get a cached value. Returns None on miss or if Redis is unavailable."""
        client = await get_redis()
        if not client:
            return None
        try:
            raw = await client.get(self._key(key))
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.debug("Cache get failed for %s: %s", key, e)
            return None

    async def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> bool:
        """Set a cached value with TTL. Returns False if Redis is unavailable."""
        client = await get_redis()
        if not client:
            return False
        try:
            serialized = json.dumps(value, ensure_ascii=False, default=str)
            await client.setex(self._key(key), ttl, serialized)
            return True
        except Exception as e:
            logger.debug("Cache set failed for %s: %s", key, e)
            return False

    async def invalidate_pattern(self, pattern: str) -> int:
        """Delete all keys matching a pattern (e.g. 'holidays:*')."""
        client = await get_redis()
        if not client:
            return 0
        try:
            keys = [
                key async for key in client.scan_iter(match=self._key(pattern), count=100)
            ]
            if keys:
                await client.delete(*keys)
            return len(keys)
        except Exception as e:
            logger.debug("Cache invalidate failed for %s: %s", pattern, e)
            return 0
