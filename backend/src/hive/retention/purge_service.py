from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hive.audit.audit_log_repo import AuditLogRepository
from hive.main.logging import get_logger
from hive.retention.batch_deleter import BatchDeleter
from hive.retention.batch_selector import BatchSelector
from hive.retention.constants import (
    AUDIT_PURGE_DAYS,
    BATCH_SIZE,
    PURGE_RUN_ACTION,
    PURGE_RUN_TARGET_TYPE,
    clamp_retention,
)
from hive.retention.retention_models import (
    PurgeCounts,
    PurgeSummary,
    RetentionTarget,
    SelectionFilter,
)
from hive.tenant_settings.tenant_settings_service import TenantSettingsService

logger = get_logger(__name__)


class RetentionPurgeService:
    """Runs one retention pass for one org.

    Collections are purged in a fixed order: messages, model invocations,
    audit logs, then threads left without messages. Every pass ends with a
    ``retention.purge_run`` audit entry; a pass that fails part way writes none.
    """

    def __init__(
        self,
        session: AsyncSession,
        tenant_settings_service: TenantSettingsService,
        batch_selector: BatchSelector,
        batch_deleter: BatchDeleter,
        audit_log_repo: AuditLogRepository,
        batch_size: int = BATCH_SIZE,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.session = session
        self.tenant_settings_service = tenant_settings_service
        self.batch_selector = batch_selector
        self.batch_deleter = batch_deleter
        self.audit_log_repo = audit_log_repo
        self.batch_size = batch_size

    async def purge_org_once(
        self,
        org_id: UUID,
        actor_id: Optional[UUID] = None,
        *,
        dry_run: bool = False,
        now: Optional[datetime] = None,
    ) -> PurgeSummary:
        now = now or datetime.now(timezone.utc)

        settings = await self.tenant_settings_service.load_tenant_settings(org_id)
        effective_days = clamp_retention(settings.retention_days)

        cutoff = now - timedelta(days=effective_days)
        audit_cutoff = now - timedelta(days=AUDIT_PURGE_DAYS)

        counts = PurgeCounts()

        if settings.on_legal_hold:
            logger.info(
                "Org is on legal hold, skipping retention purge",
                extra={"org_id": str(org_id)},
            )
            return await self._finish(
                org_id, actor_id, counts, effective_days, dry_run=dry_run, legal_hold=True
            )

        passes = [
            (RetentionTarget.MESSAGES, SelectionFilter(org_id=org_id, cutoff=cutoff)),
            (RetentionTarget.MODEL_INVOCATIONS, SelectionFilter(org_id=org_id, cutoff=cutoff)),
            (RetentionTarget.AUDIT_LOGS, SelectionFilter(org_id=org_id, cutoff=audit_cutoff)),
            (RetentionTarget.THREADS, SelectionFilter(org_id=org_id, orphan_threads=True)),
        ]
        for target, filters in passes:
            counts.add(target, await self._purge_target(target, filters, dry_run=dry_run))

        return await self._finish(
            org_id, actor_id, counts, effective_days, dry_run=dry_run, legal_hold=False
        )

    async def _purge_target(
        self, target: RetentionTarget, filters: SelectionFilter, *, dry_run: bool
    ) -> int:
        total = 0
        start = 0

        while True:
            ids = await self.batch_selector.select_ids(
                target, filters, self.batch_size, start=start
            )
            if not ids:
                break

            if dry_run:
                total += len(ids)
                start += len(ids)
            else:
                total += await self.batch_deleter.delete_by_ids(target, ids)

            if len(ids) < self.batch_size:
                break

        return total

    async def _finish(
        self,
        org_id: UUID,
        actor_id: Optional[UUID],
        counts: PurgeCounts,
        effective_days: int,
        *,
        dry_run: bool,
        legal_hold: bool,
    ) -> PurgeSummary:
        summary = PurgeSummary(
            skipped_for_legal_hold=legal_hold,
            dry_run=dry_run,
            counts=counts,
            retention_days_effective=effective_days,
            batch_size=self.batch_size,
            window_end_utc=datetime.now(timezone.utc),
        )

        await self.audit_log_repo.insert(
            org_id=org_id,
            actor_id=actor_id,
            action=PURGE_RUN_ACTION,
            target_type=PURGE_RUN_TARGET_TYPE,
            target_id=None,
            meta=summary.to_meta(),
        )
        await self.session.commit()

        logger.info(
            f"Retention purge finished for org {org_id}",
            extra={
                "org_id": str(org_id),
                "dry_run": dry_run,
                "skipped_for_legal_hold": legal_hold,
                **{f"deleted_{key}": value for key, value in counts.model_dump().items()},
            },
        )

        return summary
