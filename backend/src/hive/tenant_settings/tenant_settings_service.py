from typing import Iterable, Optional
from uuid import UUID

from hive.audit.audit_log_repo import AuditLogRepository
from hive.main.exceptions import UnauthorizedException
from hive.main.logging import get_logger
from hive.orgs.membership_repo import MembershipRepository, OrgRole
from hive.tenant_settings.tenant_settings import (
    OWNER_ONLY_KEYS,
    SETTINGS_TARGET_TYPE,
    SETTINGS_UPDATED_ACTION,
    TenantSettings,
    TenantSettingsUpdate,
    TenantSettingsView,
    default_tenant_settings,
    merge_settings,
)
from hive.tenant_settings.tenant_settings_repo import TenantSettingsRepository

logger = get_logger(__name__)

MANAGING_ROLES = (OrgRole.OWNER, OrgRole.ADMIN)


class TenantSettingsService:
    def __init__(
        self,
        tenant_settings_repo: TenantSettingsRepository,
        default_providers: Iterable[str],
        membership_repo: Optional[MembershipRepository] = None,
        audit_log_repo: Optional[AuditLogRepository] = None,
    ):
        self.repo = tenant_settings_repo
        self.default_providers = list(default_providers)
        self.membership_repo = membership_repo
        self.audit_log_repo = audit_log_repo

    def get_defaults(self) -> TenantSettings:
        return default_tenant_settings(self.default_providers)

    async def load_tenant_settings(self, org_id: UUID) -> TenantSettings:
        stored = await self.repo.get_all(org_id)
        return merge_settings(self.get_defaults(), stored)

    async def get_settings(self, org_id: UUID, actor_id: UUID) -> TenantSettingsView:
        await self._require_role(org_id, actor_id)

        return TenantSettingsView(
            settings=await self.load_tenant_settings(org_id),
            defaults=self.get_defaults(),
        )

    async def update_settings(
        self, org_id: UUID, actor_id: UUID, update: TenantSettingsUpdate
    ) -> TenantSettings:
        """Upsert every key in ``update`` and audit each one.

        Runs inside the caller's transaction; nothing is committed here.
        """
        role = await self._require_role(org_id, actor_id, allowed=MANAGING_ROLES)
        changes = update.changed_values()

        owner_only = [key for key in changes if key in OWNER_ONLY_KEYS]
        if owner_only and role is not OrgRole.OWNER:
            raise UnauthorizedException(f"Only the org owner can change {', '.join(owner_only)}")

        for key, value in changes.items():
            await self.repo.upsert(org_id, key, value)
            await self.audit_log_repo.insert(
                org_id=org_id,
                actor_id=actor_id,
                action=SETTINGS_UPDATED_ACTION,
                target_type=SETTINGS_TARGET_TYPE,
                target_id=None,
                meta={"key": key, "value": value},
            )

        logger.info(
            "Tenant settings updated",
            extra={"org_id": str(org_id), "actor_id": str(actor_id), "keys": list(changes)},
        )

        return await self.load_tenant_settings(org_id)

    async def _require_role(
        self,
        org_id: UUID,
        actor_id: UUID,
        allowed: Optional[tuple[OrgRole, ...]] = None,
    ) -> OrgRole:
        role = await self.membership_repo.get_role(org_id, actor_id)
        if role is None:
            raise UnauthorizedException("Not a member of this org")

        if allowed is not None and role not in allowed:
            raise UnauthorizedException("Insufficient role for this org")

        return role
