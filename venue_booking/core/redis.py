"""
Optional Redis cache.

Every helper is a no-op when ``REDIS_URL`` is unset or the server cannot be
reached, so callers always fall back to the database.
"""
import json
import redis
from redis.exceptions import RedisError

from venue_booking.core.config import REDIS_URL, BOOKED_DATES_CACHE_TTL
from venue_booking.core.logging_config import get_logger

logger = get_logger()

_redis_client = None


def get_redis_client():
    global _redis_client

    if _redis_client is not None or not REDIS_URL:
        return _redis_client

    client = redis.Redis.from_url(
        REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    try:
        client.ping()
    except RedisError as e:
        logger.warning(f"Redis unavailable, caching disabled for this call: {e}")
        return None

    logger.info("Redis connected")
    _redis_client = client
    return _redis_client


def _run(action: str, key: str, command):
    client = get_redis_client()
    if client is None:
        return None
    try:
        return command(client)
    except RedisError as e:
        logger.warning(f"Cache {action} failed | Key={key} -> {e}")
        return None


def get_cache(key: str):
    raw = _run("read", key, lambda client: client.get(key))
    return json.loads(raw) if raw else None


def set_cache(key: str, value, ttl: int = BOOKED_DATES_CACHE_TTL):
    _run("write", key, lambda client: client.setex(key, ttl, json.dumps(value)))


def delete_cache(key: str):
    _run("delete", key, lambda client: client.delete(key))
