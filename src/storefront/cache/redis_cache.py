"""
Redis caching for catalog reads.

The cache is strictly pass-through: any failure is logged and treated as a
miss, so the database remains the source of truth. Writers delete keys
synchronously after their transaction commits.
"""

import json
from typing import Optional, Any, Union

import redis
from redis.connection import ConnectionPool
from redis.exceptions import RedisError

from storefront.utils.config import get_settings
from storefront.utils.logger import get_logger

logger = get_logger(__name__)


def product_key(product_id: Any) -> str:
    return f"product:{product_id}"


class RedisCache:
    """
    Redis cache with JSON values and per-key TTL.

    Args:
        client: Ready Redis client, or None to build one from redis_url
        redis_url: Redis connection URL
        default_ttl: Default TTL in seconds
        max_connections: Maximum pool connections
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        redis_url: Optional[str] = None,
        default_ttl: int = 300,
        max_connections: int = 50,
    ):
        self.default_ttl = default_ttl
        self.pool = None

        if client is None:
            self.pool = ConnectionPool.from_url(
                redis_url,
                max_connections=max_connections,
                decode_responses=True,
            )
            client = redis.Redis(connection_pool=self.pool)

        self.client = client
        logger.info(f"Redis cache initialized (ttl={default_ttl}s)")

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on miss or error."""
        try:
            value = self.client.get(key)
            if value is None:
                logger.debug(f"Cache miss: {key}")
                return None

            logger.debug(f"Cache hit: {key}")
            return json.loads(value)

        except json.JSONDecodeError as e:
            logger.error(f"Cache JSON decode error for {key}: {e}")
            return None
        except RedisError as e:
            logger.error(f"Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store a JSON-serializable value. Returns False on failure."""
        ttl = ttl or self.default_ttl
        try:
            self.client.setex(key, ttl, json.dumps(value))
            logger.debug(f"Cache set: {key} (ttl={ttl}s)")
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"Cache serialization error for {key}: {e}")
            return False
        except RedisError as e:
            logger.error(f"Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            result = self.client.delete(key)
            logger.debug(f"Cache delete: {key} (deleted={result})")
            return result > 0
        except RedisError as e:
            logger.error(f"Cache delete error for {key}: {e}")
            return False

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except RedisError as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    def close(self):
        try:
            self.client.close()
            if self.pool is not None:
                self.pool.disconnect()
            logger.info("Redis cache closed")
        except RedisError as e:
            logger.error(f"Redis close error: {e}")


class NullCache:
    """Stand-in used when no REDIS_URL is configured; always misses."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        return False

    def delete(self, key: str) -> bool:
        return False

    def ping(self) -> bool:
        return True

    def close(self):
        pass


Cache = Union[RedisCache, NullCache]

# Global cache instance
_cache_instance: Optional[Cache] = None


def get_cache() -> Cache:
    """Get or create the global cache (Redis when REDIS_URL is set)."""
    global _cache_instance

    if _cache_instance is None:
        settings = get_settings()
        if settings.redis_url:
            _cache_instance = RedisCache(
                redis_url=settings.redis_url,
                default_ttl=settings.cache_ttl_seconds,
            )
        else:
            logger.info("REDIS_URL not set, product cache disabled")
            _cache_instance = NullCache()

    return _cache_instance


def reset_cache() -> None:
    global _cache_instance
    if _cache_instance is not None:
        _cache_instance.close()
    _cache_instance = None
