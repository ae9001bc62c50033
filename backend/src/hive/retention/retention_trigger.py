"""Hourly scheduler hook: asks the API to run retention for every org."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import aiohttp

from hive.main.aiohttp_client import aiohttp_client
from hive.main.config import get_settings
from hive.main.logging import get_logger

logger = get_logger(__name__)

RESPONSE_LOG_LIMIT = 800


async def trigger_retention_run(session: Optional[aiohttp.ClientSession] = None) -> bool:
    """POST to the run-all endpoint with the cron token.

    Returns True when the endpoint answered 2xx. Failures are logged and never
    raised; the next scheduled run tries again.
    """
    settings = get_settings()

    if not settings.retention_run_all_url or not settings.cron_token:
        logger.error(
            "Retention trigger is not configured, set RETENTION_RUN_ALL_URL and CRON_TOKEN",
            extra={
                "has_url": bool(settings.retention_run_all_url),
                "has_token": bool(settings.cron_token),
            },
        )
        return False

    session = session or aiohttp_client()
    payload = {"source": "worker", "triggeredAt": datetime.now(timezone.utc).isoformat()}

    try:
        async with session.post(
            settings.retention_run_all_url,
            json=payload,
            headers={"X-Cron-Token": settings.cron_token},
        ) as response:
            body = await response.text()
            if response.status < 200 or response.status >= 300:
                logger.error(
                    f"Retention run-all failed with status {response.status}: "
                    f"{body[:RESPONSE_LOG_LIMIT]}",
                    extra={"status_code": response.status},
                )
                return False

    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Retention run-all request failed: {e}", exc_info=True)
        return False

    logger.info(
        f"Retention run-all returned status {response.status}: "
        f"{body[:RESPONSE_LOG_LIMIT]}",
        extra={"status_code": response.status, "url": settings.retention_run_all_url},
    )
    return True
