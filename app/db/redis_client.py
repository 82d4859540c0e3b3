# app/db/redis_client.py
import redis

from app.core.config import Settings


def create_redis_client(settings: Settings) -> redis.Redis:
    """
    Build the Redis client backing the OTP store.

    redis-py connects lazily, so this never fails; call ``ping`` to probe.
    """
    return redis.Redis(
        host=settings.REDIS_HOST,
        port=settings.REDIS_PORT,
        password=settings.REDIS_PASSWORD,
        db=settings.REDIS_DB,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        decode_responses=True,
    )
