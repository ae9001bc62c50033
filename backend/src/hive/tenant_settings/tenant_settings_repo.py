from typing import Any
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from hive.database.tables.tenant_settings_table import TenantSettings
from hive.database.tables.base_class import utcnow


class TenantSettingsRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self, org_id: UUID) -> dict[str, Any]:
        query = sa.select(TenantSettings.key, TenantSettings.value).where(
            TenantSettings.org_id == org_id
        )
        result = await self.session.execute(query)
        return {key: value for key, value in result.all()}

    async def upsert(self, org_id: UUID, key: str, value: Any) -> None:
        row = await self.session.get(TenantSettings, (org_id, key))
        if row is None:
            self.session.add(TenantSettings(org_id=org_id, key=key, value=value))
        else:
            row.value = value
            row.updated_at = utcnow()

        await self.session.flush()
