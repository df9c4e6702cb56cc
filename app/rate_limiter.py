"""
Fixed-window rate limiting for public endpoints

Counts live in Redis when REDIS_URL is configured and reachable; otherwise
an in-process counter is used so a missing Redis never blocks intake.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import Request

from . import config
from .errors import AppError

logger = logging.getLogger(__name__)

# Redis connection
redis_client: Optional[redis.Redis] = None
_redis_unavailable_until = 0.0
REDIS_RETRY_INTERVAL = 60  # seconds to wait before trying Redis again after a failure

# Format: {key: {'count': int, 'reset_time': int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()
MEMORY_CACHE_CLEANUP_INTERVAL = 60  # Sweep expired entries at most once a minute
last_cleanup_time = 0


class RateLimitExceeded(AppError):
    status_code = 429

    def __init__(self, limit: int, window_seconds: int, retry_after: int):
        super().__init__(
            f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds."
        )
        self.retry_after = retry_after


def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client; None when Redis is not configured or down"""
    global redis_client, _redis_unavailable_until

    if not config.REDIS_URL:
        return None
    if redis_client is not None:
        return redis_client
    if time.time() < _redis_unavailable_until:
        return None

    try:
        client = redis.from_url(
            config.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully via URL")
    except Exception as e:
        _redis_unavailable_until = time.time() + REDIS_RETRY_INTERVAL
        logger.warning(f"⚠️ Redis unavailable, rate limiting falls back to memory: {e}")
        return None

    return redis_client


def cleanup_expired_cache():
    """Remove expired entries from memory cache"""
    global last_cleanup_time
    current_time = int(time.time())

    if current_time - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return

    with cache_lock:
        expired_keys = [k for k, v in memory_cache.items() if current_time >= v["reset_time"]]
        for k in expired_keys:
            del memory_cache[k]

    if expired_keys:
        logger.debug(f"🧹 Cleaned up {len(expired_keys)} expired rate limit entries")
    last_cleanup_time = current_time


def check_memory_rate_limit(key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
    """Returns (is_allowed, current_count, ttl_seconds) using the in-process counter"""
    cleanup_expired_cache()
    current_time = int(time.time())
    with cache_lock:
        entry = memory_cache.get(key)
        if entry is None or current_time >= entry["reset_time"]:
            entry = {"count": 0, "reset_time": current_time + window_seconds}
            memory_cache[key] = entry

        is_allowed = entry["count"] < limit
        if is_allowed:
            entry["count"] += 1
        return is_allowed, entry["count"], max(0, entry["reset_time"] - current_time)


def check_redis_rate_limit(
    key: str, limit: int, window_seconds: int, client: redis.Redis
) -> tuple[bool, int, int]:
    """INCR + EXPIRE on first hit of the window"""
    pipe = client.pipeline()
    pipe.incr(key)
    pipe.ttl(key)
    count, ttl = pipe.execute()
    if ttl is None or ttl < 0:
        client.expire(key, window_seconds)
        ttl = window_seconds
    return count <= limit, count, ttl


def check_rate_limit(key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
    client = get_redis_client()
    if client is not None:
        try:
            return check_redis_rate_limit(key, limit, window_seconds, client)
        except Exception as e:
            logger.warning(f"⚠️ Redis rate limit check failed, using memory: {e}")
    return check_memory_rate_limit(key, limit, window_seconds)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a per-IP rate limiter dependency

    Example usage:
        rate_limit_login = create_rate_limiter(limit=20, window_seconds=3600, key_prefix="login")

        @router.post("/login")
        async def login(data: LoginRequest, _: None = Depends(rate_limit_login)):
            ...
    """

    async def rate_limiter(request: Request):
        if not config.RATE_LIMIT_ENABLED:
            return

        key = f"{key_prefix}:{client_ip(request)}"
        is_allowed, current_count, ttl = check_rate_limit(key, limit, window_seconds)
        if not is_allowed:
            logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit}")
            raise RateLimitExceeded(limit, window_seconds, ttl)

    return rate_limiter
