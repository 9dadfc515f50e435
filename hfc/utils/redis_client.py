# hfc/utils/redis_client.py
from typing import Optional

import redis.asyncio as redis
from hfc.settings import settings

_redis_pool: Optional[redis.ConnectionPool] = None


def get_redis_client() -> redis.Redis:
    """Returns a Redis client instance from the shared connection pool."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True
        )
    return redis.Redis(connection_pool=_redis_pool)
