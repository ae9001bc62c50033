"""Append-only writes to the audit log."""

from typing import Any, Optional
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from hive.audit.audit_log import AuditLogInDB
from hive.database.tables.audit_log_table import AuditLogs
from hive.main.logging import get_logger

logger = get_logger(__name__)


class AuditLogRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(
        self,
        org_id: UUID,
        actor_id: Optional[UUID],
        action: str,
        target_type: str,
        target_id: Optional[str] = None,
        meta: Optional[dict[str, Any]] = None,
        content_sha256: Optional[str] = None,
    ) -> AuditLogInDB:
        """Insert one audit entry. The caller owns the commit."""
        query = (
            sa.insert(AuditLogs)
            .values(
                org_id=org_id,
                actor_id=actor_id,
                action=action,
                target_type=target_type,
                target_id=target_id,
                content_sha256=content_sha256,
                meta=meta or {},
            )
            .returning(AuditLogs)
        )

        result = await self.session.scalar(query)
        logger.debug(
            f"Audit entry {action} written",
            extra={"org_id": str(org_id), "action": action},
        )
        return AuditLogInDB.model_validate(result)

    async def list_for_org(
        self, org_id: UUID, action: Optional[str] = None
    ) -> list[AuditLogInDB]:
        query = (
            sa.select(AuditLogs)
            .where(AuditLogs.org_id == org_id)
            .order_by(AuditLogs.created_at.asc(), AuditLogs.id.asc())
        )
        if action is not None:
            query = query.where(AuditLogs.action == action)

        result = await self.session.scalars(query)
        return [AuditLogInDB.model_validate(row) for row in result.all()]
