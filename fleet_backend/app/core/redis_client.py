"""
Redis client for revoked tokens and the persisted API-key store.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError
from fleet_backend.app.core.config import settings

logger = logging.getLogger(__name__)

redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """FastAPI dependency; tests override it with an in-memory fake."""
    return redis_client


async def ping_redis() -> bool:
    """True when Redis answers; used by the health check."""
    try:
        return bool(await redis_client.ping())
    except (RedisError, OSError) as e:
        logger.warning("Redis ping failed: %s", e)
        return False


async def close_redis() -> None:
    await redis_client.aclose()
