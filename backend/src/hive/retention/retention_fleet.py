from typing import Union

from dependency_injector import providers

from hive.database.database import DatabaseSessionManager
from hive.main.container.container import Container
from hive.main.logging import get_logger
from hive.main.request_context import bound_context
from hive.retention.retention_models import PurgeFailure, PurgeSummary, RunAllResponse

logger = get_logger(__name__)


class RetentionFleetRunner:
    """Runs the purge for every org, one at a time.

    Each org gets its own session and container. A failing org is logged and
    reported in the results; the pass continues with the next one.
    """

    def __init__(self, sessionmanager: DatabaseSessionManager):
        self.sessionmanager = sessionmanager

    async def run_all(self, dry_run: bool = False) -> RunAllResponse:
        async with self.sessionmanager.session() as session:
            container = Container(session=providers.Object(session))
            org_ids = await container.org_repo().list_org_ids()

        logger.info(
            f"Starting retention pass over {len(org_ids)} orgs",
            extra={"org_count": len(org_ids), "dry_run": dry_run},
        )

        results: dict[str, Union[PurgeSummary, PurgeFailure]] = {}
        failures = 0
        for org_id in org_ids:
            with bound_context(org_id=str(org_id)):
                try:
                    async with self.sessionmanager.session() as session:
                        container = Container(session=providers.Object(session))
                        purge_service = container.retention_purge_service()
                        results[str(org_id)] = await purge_service.purge_org_once(
                            org_id, None, dry_run=dry_run
                        )
                except Exception as e:
                    failures += 1
                    logger.error(
                        f"Retention purge failed for org {org_id}: {e}",
                        exc_info=True,
                        extra={"org_id": str(org_id)},
                    )
                    results[str(org_id)] = PurgeFailure(error=str(e))

        if failures:
            logger.warning(
                f"Retention pass completed with {failures} failed orgs",
                extra={"org_count": len(org_ids), "failed": failures},
            )
        else:
            logger.info("Retention pass completed", extra={"org_count": len(org_ids)})

        return RunAllResponse(dry_run=dry_run, results=results)
