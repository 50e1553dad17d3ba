"""
Redis caching service for event listings.

CACHING STRATEGY
================

What we cache:
  - `events` query results (already transformed, JSON-serialized)
  - Cache key pattern: "events:list:term={term}&skip={skip}&limit={limit}"

Invalidation strategy:
  - Any event create/update/delete and any account deletion drops every
    listing key (SCAN on the "events:list:" prefix)
  - TTL-based expiry as safety net

Bookings never change a listing, so booking mutations leave the cache alone.
Redis is optional: when disabled or unreachable every call is a no-op and
the resolvers read from the database.
"""

import json
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

EVENT_LIST_PREFIX = "events:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
        )
        try:
            await client.ping()
        except RedisError as e:
            logger.error("redis_connection_failed", error=str(e))
            await client.aclose()
            return None
        _redis_client = client
        logger.info("redis_connected", url=settings.REDIS_URL)

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_event_list_key(search_term: Optional[str], skip: int, limit: int) -> str:
    term = (search_term or "").strip()
    return f"{EVENT_LIST_PREFIX}term={term}&skip={skip}&limit={limit}"


async def get_cached_events(search_term: Optional[str], skip: int, limit: int) -> Optional[list[dict]]:
    """Retrieve a cached event listing."""
    client = await get_redis()
    if not client:
        return None

    key = _make_event_list_key(search_term, skip, limit)
    try:
        data = await client.get(key)
    except RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data is None:
        logger.debug("cache_miss", key=key)
        return None
    logger.debug("cache_hit", key=key)
    return json.loads(data)


async def set_cached_events(
    search_term: Optional[str],
    skip: int,
    limit: int,
    data: list[dict],
) -> None:
    """Cache an event listing with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_event_list_key(search_term, skip, limit)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, ensure_ascii=False))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """Invalidate all cached event listings."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{EVENT_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
