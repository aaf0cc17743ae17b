"""
Rate limiting for public write endpoints
Redis sliding window, used as a FastAPI dependency
"""

import time
import logging
from fastapi import Request, HTTPException
import redis.asyncio as aioredis
import os

logger = logging.getLogger(__name__)


def rate_limit_enabled() -> bool:
    return os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


class RateLimiter:
    """Simple rate limiter using Redis sliding window."""

    def __init__(self, redis_url: str = None):
        self.redis_url = redis_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self.redis = None

    async def init_redis(self):
        """Initialize Redis connection."""
        if not self.redis:
            self.redis = aioredis.from_url(self.redis_url, decode_responses=True)

    async def is_rate_limited(self, key: str, limit: int = 5, window: int = 60) -> bool:
        """
        Check if key is rate limited.
        Args:
            key: Unique identifier (IP + path)
            limit: Max requests allowed (default: 5)
            window: Time window in seconds (default: 60)
        """
        await self.init_redis()

        now = time.time()
        window_start = now - window

        # Use Redis pipeline for atomic operations
        pipe = self.redis.pipeline()
        pipe.zremrangebyscore(f"rate_limit:{key}", 0, window_start)
        pipe.zcard(f"rate_limit:{key}")
        pipe.zadd(f"rate_limit:{key}", {f"{now:.6f}": now})
        pipe.expire(f"rate_limit:{key}", window + 10)

        results = await pipe.execute()
        current_count = results[1]

        return current_count >= limit

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.close()
            self.redis = None


# Global rate limiter instance
rate_limiter = RateLimiter()


def client_ip(request: Request) -> str:
    ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not ip:
        ip = request.headers.get("X-Real-IP", "")
    if not ip:
        ip = getattr(request.client, "host", "unknown")
    return ip


class RateLimit:
    """
    Dependency that rejects a client after `limit` calls per `window` seconds.

    Usage: `@router.post("/reviews", dependencies=[Depends(RateLimit(5, 60))])`
    Redis outages fail open.
    """

    def __init__(self, limit: int = 5, window: int = 60, limiter: RateLimiter = None):
        self.limit = limit
        self.window = window
        self.limiter = limiter or rate_limiter

    async def __call__(self, request: Request):
        if not rate_limit_enabled():
            return

        ip = client_ip(request)
        endpoint = request.url.path

        try:
            is_limited = await self.limiter.is_rate_limited(f"{ip}:{endpoint}", self.limit, self.window)
        except Exception as e:
            logger.error(f"Rate limiting error: {e}")
            return

        if is_limited:
            logger.warning(f"Rate limit exceeded for {ip} on {endpoint}")
            raise HTTPException(
                status_code=429,
                detail={
                    "error": "Rate limit exceeded",
                    "limit": self.limit,
                    "window": self.window,
                    "message": f"Too many requests. Limit: {self.limit} requests per {self.window} seconds."
                }
            )
