from uuid import UUID

from fastapi import APIRouter, Depends

from hive.main.container.container import Container
from hive.main.exceptions import NotFoundException
from hive.server.dependencies.auth import authenticate_admin_api_key, get_actor_id
from hive.server.dependencies.container import get_container_with_transaction
from hive.tenant_settings.tenant_settings import (
    TenantSettingsUpdate,
    TenantSettingsUpdated,
    TenantSettingsView,
)

router = APIRouter(dependencies=[Depends(authenticate_admin_api_key)])


async def _ensure_org(container: Container, org_id: UUID):
    if not await container.org_repo().exists(org_id):
        raise NotFoundException("Org not found")


@router.get("/admin/orgs/{org_id}/settings", response_model=TenantSettingsView)
async def get_tenant_settings(
    org_id: UUID,
    actor_id: UUID = Depends(get_actor_id),
    container: Container = Depends(get_container_with_transaction),
):
    await _ensure_org(container, org_id)
    return await container.tenant_settings_service().get_settings(org_id, actor_id)


@router.put("/admin/orgs/{org_id}/settings", response_model=TenantSettingsUpdated)
async def update_tenant_settings(
    org_id: UUID,
    update: TenantSettingsUpdate,
    actor_id: UUID = Depends(get_actor_id),
    container: Container = Depends(get_container_with_transaction),
):
    """Owners and admins may toggle providers. Only owners may change
    `retentionDays` or `legalHold`. Every changed key is audited."""
    await _ensure_org(container, org_id)
    settings = await container.tenant_settings_service().update_settings(
        org_id, actor_id, update
    )
    return TenantSettingsUpdated(settings=settings)
