"""
Redis connection pool for the distributed attempt lock backend.
"""

from functools import lru_cache

import redis.asyncio as redis
from redis.exceptions import RedisError

from chess_daily.core.logger.logger import get_logger
from chess_daily.infra.config.settings import settings

logger = get_logger(__name__)


@lru_cache()
def get_redis_pool() -> redis.ConnectionPool:
    """Process-wide pool built from REDIS_URL"""
    return redis.ConnectionPool.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        max_connections=settings.REDIS_MAX_CONNECTIONS
    )


async def get_redis() -> redis.Redis:
    """Client on the shared pool, verified with a PING"""
    client = redis.Redis(connection_pool=get_redis_pool())
    try:
        await client.ping()
    except RedisError as e:
        logger.error("Failed to connect to Redis", extra={"error": str(e), "max_connections": settings.REDIS_MAX_CONNECTIONS})
        raise
    logger.info("Connected to Redis successfully", extra={"max_connections": settings.REDIS_MAX_CONNECTIONS})
    return client
