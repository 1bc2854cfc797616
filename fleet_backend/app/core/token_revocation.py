"""
Sign-out support: revoked tokens are kept in Redis until they would have
expired anyway.
"""

import logging

from redis.exceptions import RedisError

from fleet_backend.app.core.jwt import token_lifetime

logger = logging.getLogger(__name__)

REVOKED_TOKEN_PREFIX = "fleet:revoked:"


def _key(token: str) -> str:
    return f"{REVOKED_TOKEN_PREFIX}{token}"


async def revoke_token(redis, token: str, user_id: int) -> bool:
    """
    Mark ``token`` as signed out.

    Returns:
        False when Redis could not be written; the token then stays valid
        until it expires.
    """
    try:
        await redis.setex(_key(token), int(token_lifetime().total_seconds()), str(user_id))
    except RedisError as e:
        logger.error("Could not revoke token for user %s: %s", user_id, e)
        return False
    logger.info("User %s signed out", user_id)
    return True


async def is_token_revoked(redis, token: str) -> bool:
    """True when the token was signed out. An unreachable Redis counts as not revoked."""
    try:
        return await redis.exists(_key(token)) > 0
    except RedisError as e:
        logger.warning("Revocation check failed: %s", e)
        return False
