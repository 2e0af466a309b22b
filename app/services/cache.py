"""
Redis Cache Service
===================

Redis connection management and the small set of cache operations the
API needs (currently: the revoked-session list written on sign-out).

All operations are best effort: a Redis failure is logged and reported
as a miss, never raised to the request. After a failed connection
attempt no new attempt is made for ``REDIS_RETRY_SECONDS``, so an
unreachable host doesn't add a connect timeout to every request.
"""

import json
import logging
import time
from typing import Any, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from app.config import settings

logger = logging.getLogger(__name__)

REDIS_RETRY_SECONDS = 30.0

# Global Redis client instance
_redis_client: Optional[Redis] = None

# Monotonic time before which no reconnect is attempted
_retry_after: float = 0.0


class RedisUnavailableError(ConnectionError):
    """Redis failed recently and the retry window hasn't passed."""


async def init_redis() -> Redis:
    """
    Initialize Redis connection pool and pre-warm a connection.

    Returns:
        Redis client instance

    Raises:
        RedisUnavailableError: A previous attempt failed less than
            ``REDIS_RETRY_SECONDS`` ago
    """
    global _redis_client, _retry_after

    if _redis_client is None:
        if time.monotonic() < _retry_after:
            raise RedisUnavailableError("Redis unavailable, next attempt deferred")

        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=20,
            socket_keepalive=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        # Pre-warm: force a real connection so the first request
        # doesn't pay the TCP handshake cost.
        try:
            await client.ping()
        except Exception:
            _retry_after = time.monotonic() + REDIS_RETRY_SECONDS
            await client.aclose()
            raise

        _redis_client = client
        _retry_after = 0.0
        logger.info("Redis connection established")

    return _redis_client


async def get_redis() -> Redis:
    """Get Redis client, initializing if necessary."""
    if _redis_client is None:
        return await init_redis()

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("Redis connection closed")


class CacheManager:
    """
    Redis cache manager with common operations.

    Key naming convention:
        cache:{module}:{resource}:{identifier}
    """

    @staticmethod
    async def set(
        key: str,
        value: Any,
        ttl: int,
    ) -> bool:
        """
        Set value in cache with TTL.

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await get_redis()
            serialized = json.dumps(value, default=str)
            await client.setex(key, max(ttl, 1), serialized)
            return True
        except Exception as e:
            logger.warning("Cache set error for key %s: %s", key, e)
            return False

    @staticmethod
    async def exists(key: str) -> bool:
        """
        Check if key exists in cache.

        Args:
            key: Cache key

        Returns:
            True if key exists, False otherwise (including on Redis failure)
        """
        try:
            client = await get_redis()
            return await client.exists(key) > 0
        except Exception as e:
            logger.warning("Cache exists error for key %s: %s", key, e)
            return False


# =============================================================================
# Cache Key Builders
# =============================================================================

class CacheKeys:
    """Cache key builders for consistent naming."""

    @staticmethod
    def revoked_session(token_id: str) -> str:
        """Marker written on sign-out for a session token id."""
        return f"cache:session:revoked:{token_id}"
