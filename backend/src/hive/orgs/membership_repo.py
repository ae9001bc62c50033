from enum import Enum
from typing import Optional
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from hive.database.tables.org_table import OrgMembers


class OrgRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class MembershipRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_role(self, org_id: UUID, user_id: UUID) -> Optional[OrgRole]:
        """Return the user's role in the org, or None if they are not a member."""
        query = sa.select(OrgMembers.role).where(
            OrgMembers.org_id == org_id, OrgMembers.user_id == user_id
        )
        role = await self.session.scalar(query)
        if role is None:
            return None

        try:
            return OrgRole(role)
        except ValueError:
            # Unknown roles get the least privilege
            return OrgRole.MEMBER
