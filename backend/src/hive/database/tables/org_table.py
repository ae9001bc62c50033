from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hive.database.tables.base_class import BasePublic


class Orgs(BasePublic):
    name: Mapped[str] = mapped_column(String(255))


class OrgMembers(BasePublic):
    __tablename__ = "org_members"

    org_id: Mapped[UUID] = mapped_column(ForeignKey("orgs.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[UUID] = mapped_column(index=True)
    role: Mapped[str] = mapped_column(String(20), default="member")

    __table_args__ = (UniqueConstraint("org_id", "user_id", name="uq_org_members_org_user"),)
