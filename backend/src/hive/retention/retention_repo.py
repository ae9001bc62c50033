from datetime import datetime
from typing import Sequence
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from hive.database.tables.audit_log_table import AuditLogs
from hive.database.tables.thread_table import Messages, ModelInvocations, Threads
from hive.retention.retention_models import RetentionTarget

TARGET_TABLES = {
    RetentionTarget.MESSAGES: Messages,
    RetentionTarget.MODEL_INVOCATIONS: ModelInvocations,
    RetentionTarget.AUDIT_LOGS: AuditLogs,
    RetentionTarget.THREADS: Threads,
}


class RetentionRepository:
    """Paged id lookups and id-list deletes over the retained tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def page_ids_created_before(
        self,
        target: RetentionTarget,
        org_id: UUID,
        cutoff: datetime,
        *,
        offset: int,
        limit: int,
    ) -> list[UUID]:
        table = TARGET_TABLES[target]
        stmt = (
            sa.select(table.id)
            .where(table.org_id == org_id, table.created_at <= cutoff)
            .order_by(table.created_at.asc(), table.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.scalars(stmt)
        return list(result.all())

    async def page_orphan_thread_ids(
        self,
        org_id: UUID,
        *,
        offset: int,
        limit: int,
    ) -> list[UUID]:
        has_messages = sa.exists().where(Messages.thread_id == Threads.id)
        stmt = (
            sa.select(Threads.id)
            .where(Threads.org_id == org_id, ~has_messages)
            .order_by(Threads.created_at.asc(), Threads.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.scalars(stmt)
        return list(result.all())

    async def delete_ids(self, target: RetentionTarget, ids: Sequence[UUID]) -> int:
        table = TARGET_TABLES[target]
        stmt = sa.delete(table).where(table.id.in_(list(ids)))
        result = await self.session.execute(stmt, execution_options={"synchronize_session": False})
        return result.rowcount or 0

    async def commit(self) -> None:
        await self.session.commit()
