"""
Redis-based rate limiting for abuse-prone write endpoints.

Protects application submission, message sending and SOS alerts. Fails open
when Redis is unreachable so the marketplace keeps working without it.
"""

import logging
import redis
from fastapi import HTTPException, status
from worknexus.core.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window rate limiter backed by Redis counters with expiry.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.redis_client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )

    def check_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int,
        error_message: str = "Rate limit exceeded"
    ) -> None:
        """
        Check if a request is within rate limits.

        Args:
            key: Unique identifier for this rate limit (e.g., "apply:<user_id>")
            max_requests: Maximum number of requests allowed in the window
            window_seconds: Window length in seconds
            error_message: Message used in the 429 response

        Raises:
            HTTPException: 429 Too Many Requests if the limit is exceeded
        """
        if not self.enabled:
            return

        try:
            current_count = self.redis_client.get(key)

            if current_count is None:
                self.redis_client.setex(key, window_seconds, 1)
                return

            if int(current_count) >= max_requests:
                ttl = self.redis_client.ttl(key)
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=f"{error_message}. Try again in {ttl} seconds."
                )
            self.redis_client.incr(key)

        except redis.RedisError as e:
            logger.warning(f"Redis rate limiter unavailable, allowing request: {e}")

    def reset_limit(self, key: str) -> None:
        try:
            self.redis_client.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Redis reset error: {e}")


# Singleton instance
rate_limiter = RateLimiter(enabled=settings.RATE_LIMIT_ENABLED)


def check_application_rate_limit(user_id: str) -> None:
    """
    Limit: 20 applications per 10 minutes per user.
    """
    rate_limiter.check_rate_limit(
        key=f"apply:{user_id}",
        max_requests=20,
        window_seconds=600,
        error_message="Too many applications submitted"
    )


def check_message_rate_limit(user_id: str) -> None:
    """
    Limit: 60 messages per minute per user.
    """
    rate_limiter.check_rate_limit(
        key=f"message:{user_id}",
        max_requests=60,
        window_seconds=60,
        error_message="You are sending messages too quickly"
    )


def check_sos_rate_limit(user_id: str) -> None:
    """
    Limit: 5 SOS alerts per 5 minutes per user.
    """
    rate_limiter.check_rate_limit(
        key=f"sos:{user_id}",
        max_requests=5,
        window_seconds=300,
        error_message="SOS already sent. Please call emergency services if you need immediate help"
    )
