from uuid import UUID

from fastapi import APIRouter, Depends

from hive.database.database import DatabaseSessionManager, get_sessionmanager
from hive.main.config import get_settings
from hive.main.container.container import Container
from hive.main.exceptions import NotFoundException, UnauthorizedException
from hive.orgs.membership_repo import OrgRole
from hive.retention.retention_fleet import RetentionFleetRunner
from hive.retention.retention_models import PurgeSummary, RunAllResponse
from hive.server.dependencies.auth import (
    authenticate_admin_api_key,
    get_actor_id,
    verify_cron_token,
)
from hive.server.dependencies.container import get_container

router = APIRouter()


@router.post(
    "/admin/retention/run-all",
    response_model=RunAllResponse,
    dependencies=[Depends(verify_cron_token)],
)
async def run_retention_for_all_orgs(
    sessionmanager: DatabaseSessionManager = Depends(get_sessionmanager),
):
    """Purge every org. Called hourly by the scheduler with the shared cron token.

    Dry run is controlled by `RETENTION_DRY_RUN`, not by the caller.
    """
    runner = RetentionFleetRunner(sessionmanager)
    return await runner.run_all(dry_run=get_settings().retention_dry_run)


@router.post(
    "/admin/orgs/{org_id}/retention/run",
    response_model=PurgeSummary,
    dependencies=[Depends(authenticate_admin_api_key)],
)
async def run_retention_for_org(
    org_id: UUID,
    dry_run: bool = False,
    actor_id: UUID = Depends(get_actor_id),
    container: Container = Depends(get_container),
):
    """Purge a single org now. The actor must be an owner or admin of the org."""
    if not await container.org_repo().exists(org_id):
        raise NotFoundException("Org not found")

    role = await container.membership_repo().get_role(org_id, actor_id)
    if role not in (OrgRole.OWNER, OrgRole.ADMIN):
        raise UnauthorizedException("Only org owners and admins can run retention")

    purge_service = container.retention_purge_service()
    return await purge_service.purge_org_once(org_id, actor_id, dry_run=dry_run)
