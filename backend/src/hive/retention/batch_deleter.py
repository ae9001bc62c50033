from typing import Sequence
from uuid import UUID

from hive.main.logging import get_logger
from hive.retention.constants import SELECT_CHUNK
from hive.retention.retention_models import RetentionTarget
from hive.retention.retention_repo import RetentionRepository

logger = get_logger(__name__)


class BatchDeleter:
    def __init__(self, retention_repo: RetentionRepository, chunk_size: int = SELECT_CHUNK):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.retention_repo = retention_repo
        self.chunk_size = chunk_size

    async def delete_by_ids(self, target: RetentionTarget, ids: Sequence[UUID]) -> int:
        """Delete ids chunk by chunk and return how many rows the store removed.

        Each chunk is committed on its own so an interrupted run keeps what it
        already deleted. Rows removed concurrently are simply not counted.
        """
        if not ids:
            return 0

        deleted = 0
        for i in range(0, len(ids), self.chunk_size):
            chunk = ids[i : i + self.chunk_size]
            deleted += await self.retention_repo.delete_ids(target, chunk)
            await self.retention_repo.commit()

        if deleted < len(ids):
            logger.debug(
                f"Deleted {deleted} of {len(ids)} requested {target.value}",
                extra={"target": target.value},
            )

        return deleted
