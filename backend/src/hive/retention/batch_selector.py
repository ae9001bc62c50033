from uuid import UUID

from hive.main.logging import get_logger
from hive.retention.constants import SELECT_CHUNK
from hive.retention.retention_models import RetentionTarget, SelectionFilter
from hive.retention.retention_repo import RetentionRepository

logger = get_logger(__name__)


class BatchSelector:
    """Collects up to ``limit`` ids eligible for deletion, oldest first.

    The store is read in pages of ``page_size``; a short page means the data
    is exhausted and selection stops even if ``limit`` was not reached.
    """

    def __init__(self, retention_repo: RetentionRepository, page_size: int = SELECT_CHUNK):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.retention_repo = retention_repo
        self.page_size = page_size

    async def select_ids(
        self,
        target: RetentionTarget,
        filters: SelectionFilter,
        limit: int,
        *,
        start: int = 0,
    ) -> list[UUID]:
        """Select ids for one tenant.

        Args:
            target: Table to select from.
            filters: Cutoff for time based targets, or ``orphan_threads`` for threads.
            limit: Maximum number of ids to return.
            start: Number of eligible rows to skip. Dry runs use this to move past
                rows they already counted, since nothing gets deleted between batches.

        Returns:
            Ids ordered by ``created_at`` ascending.
        """
        if filters.orphan_threads and target is not RetentionTarget.THREADS:
            raise ValueError("Orphan selection only applies to threads")
        if not filters.orphan_threads and filters.cutoff is None:
            raise ValueError(f"A cutoff is required to select {target.value}")

        out: list[UUID] = []
        offset = start

        while len(out) < limit:
            page = await self._fetch_page(target, filters, offset=offset)
            out.extend(page)

            if len(page) < self.page_size:
                break
            offset += self.page_size

        logger.debug(
            f"Selected {min(len(out), limit)} {target.value} for purge",
            extra={"org_id": str(filters.org_id), "target": target.value, "start": start},
        )
        return out[:limit]

    async def _fetch_page(
        self, target: RetentionTarget, filters: SelectionFilter, *, offset: int
    ) -> list[UUID]:
        if filters.orphan_threads:
            return await self.retention_repo.page_orphan_thread_ids(
                filters.org_id, offset=offset, limit=self.page_size
            )

        return await self.retention_repo.page_ids_created_before(
            target,
            filters.org_id,
            filters.cutoff,
            offset=offset,
            limit=self.page_size,
        )
