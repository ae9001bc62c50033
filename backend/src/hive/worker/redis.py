from datetime import datetime, timezone
from typing import NamedTuple

import redis.asyncio as aioredis

from hive.main.config import get_settings

# arq's default queue is "arq:queue"; the worker refreshes this key every health_check_interval
HEALTH_CHECK_KEY = "arq:queue:health-check"

_redis_client = None


def _get_redis_connection():
    settings = get_settings()
    pool = aioredis.ConnectionPool.from_url(f"redis://{settings.redis_host}:{settings.redis_port}")
    return aioredis.Redis(connection_pool=pool)


def get_redis():
    """Get Redis client, creating it if needed."""
    global _redis_client
    if _redis_client is None:
        _redis_client = _get_redis_connection()
    return _redis_client


class WorkerHealth(NamedTuple):
    status: str  # "HEALTHY", "UNHEALTHY", "UNKNOWN"
    last_heartbeat: str | None
    details: str | None


async def get_worker_health() -> WorkerHealth:
    """Check the arq worker by looking for its health check key in Redis."""
    try:
        worker_health_data = await get_redis().get(HEALTH_CHECK_KEY)
    except aioredis.RedisError as e:
        return WorkerHealth(
            status="UNKNOWN",
            last_heartbeat=None,
            details=f"Redis connection error: {str(e)}",
        )

    if worker_health_data:
        return WorkerHealth(
            status="HEALTHY",
            last_heartbeat=datetime.now(timezone.utc).isoformat(),
            details=worker_health_data.decode("utf-8"),
        )

    return WorkerHealth(
        status="UNHEALTHY",
        last_heartbeat=None,
        details="Worker health check key not found or expired",
    )
