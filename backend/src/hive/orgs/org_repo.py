from typing import AsyncIterator
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from hive.database.tables.org_table import Orgs
from hive.retention.constants import ORG_PAGE_SIZE


class OrgRepository:
    def __init__(self, session: AsyncSession, page_size: int = ORG_PAGE_SIZE):
        self.session = session
        self.page_size = page_size

    async def exists(self, org_id: UUID) -> bool:
        query = sa.select(sa.exists().where(Orgs.id == org_id))
        return bool(await self.session.scalar(query))

    async def iter_org_ids(self) -> AsyncIterator[list[UUID]]:
        """Yield org ids page by page, ordered by creation then id."""
        offset = 0
        while True:
            query = (
                sa.select(Orgs.id)
                .order_by(Orgs.created_at.asc(), Orgs.id.asc())
                .offset(offset)
                .limit(self.page_size)
            )
            page = list((await self.session.scalars(query)).all())
            if page:
                yield page
            if len(page) < self.page_size:
                return
            offset += self.page_size

    async def list_org_ids(self) -> list[UUID]:
        org_ids: list[UUID] = []
        async for page in self.iter_org_ids():
            org_ids.extend(page)
        return org_ids

