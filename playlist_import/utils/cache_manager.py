"""
Cache for catalog search responses.
Redis backend when a URL is configured, bounded in-memory store otherwise.
"""

import json
import logging
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class CacheManager:
    """Key/value cache with TTL, Redis first and memory as fallback."""

    def __init__(self, redis_url: Optional[str] = None, namespace: str = "playlist_import",
                 max_memory_items: int = 1000):
        self.redis_url = redis_url
        self.namespace = namespace
        self.redis: Optional[redis.Redis] = None
        self.memory_cache: "OrderedDict[str, Tuple[Any, datetime]]" = OrderedDict()
        self.max_memory_items = max_memory_items

    async def connect(self):
        """Connect to Redis if URL is provided."""
        if not self.redis_url:
            return
        try:
            self.redis = redis.from_url(self.redis_url)
            await self.redis.ping()
            logger.info("Connected to Redis cache")
        except Exception as e:
            logger.warning(f"Failed to connect to Redis: {e}, using memory cache")
            self.redis = None

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    def get_cache_key(self, prefix: str, *args) -> str:
        """Generate a namespaced cache key from prefix and arguments."""
        parts = [self.namespace, prefix] + [str(arg).lower() for arg in args]
        return ":".join(parts)

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        if self.redis:
            try:
                value = await self.redis.get(key)
                if value:
                    return json.loads(value)
            except Exception as e:
                logger.warning(f"Redis get error: {e}")

        entry = self.memory_cache.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if datetime.now() >= expires_at:
            del self.memory_cache[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int = 3600):
        """Set value in cache with TTL in seconds."""
        if self.redis:
            try:
                await self.redis.setex(key, ttl, json.dumps(value, default=str))
                return
            except Exception as e:
                logger.warning(f"Redis set error: {e}")

        self.memory_cache[key] = (value, datetime.now() + timedelta(seconds=ttl))
        self.memory_cache.move_to_end(key)
        while len(self.memory_cache) > self.max_memory_items:
            self.memory_cache.popitem(last=False)

    async def delete(self, key: str):
        """Delete value from cache."""
        if self.redis:
            try:
                await self.redis.delete(key)
            except Exception as e:
                logger.warning(f"Redis delete error: {e}")
        self.memory_cache.pop(key, None)
