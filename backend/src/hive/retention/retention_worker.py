from typing import Any, Dict
from uuid import UUID

from hive.main.config import get_settings
from hive.main.container.container import Container
from hive.main.request_context import bound_context
from hive.retention.retention_trigger import trigger_retention_run
from hive.worker.worker import Worker

worker = Worker()


@worker.cron_job(minute=get_settings().retention_cron_minute, run_at_startup=False)
async def retention_run_all() -> bool:
    return await trigger_retention_run()


@worker.function()
async def purge_org_retention(
    org_id: str, dry_run: bool = False, *, container: Container
) -> Dict[str, Any]:
    """Enqueue with ``arq`` to purge one org outside the hourly schedule."""
    with bound_context(org_id=org_id, job="purge_org_retention"):
        purge_service = container.retention_purge_service()
        summary = await purge_service.purge_org_once(UUID(org_id), None, dry_run=dry_run)
        return summary.to_meta()
