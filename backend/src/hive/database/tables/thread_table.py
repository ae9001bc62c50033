from typing import Optional
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hive.database.tables.base_class import BasePublic


class Threads(BasePublic):
    org_id: Mapped[UUID] = mapped_column(ForeignKey("orgs.id", ondelete="CASCADE"))
    user_id: Mapped[Optional[UUID]] = mapped_column()
    title: Mapped[Optional[str]] = mapped_column(String(255))

    __table_args__ = (Index("idx_threads_org_created", "org_id", "created_at"),)


class Messages(BasePublic):
    org_id: Mapped[UUID] = mapped_column(ForeignKey("orgs.id", ondelete="CASCADE"))
    thread_id: Mapped[UUID] = mapped_column(
        ForeignKey("threads.id", ondelete="CASCADE"), index=True
    )
    role: Mapped[str] = mapped_column(String(20), default="user")
    content_text: Mapped[Optional[str]] = mapped_column(Text)
    model: Mapped[Optional[str]] = mapped_column(String(100))

    __table_args__ = (Index("idx_messages_org_created", "org_id", "created_at"),)


class ModelInvocations(BasePublic):
    __tablename__ = "model_invocations"

    org_id: Mapped[UUID] = mapped_column(ForeignKey("orgs.id", ondelete="CASCADE"))
    thread_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("threads.id", ondelete="SET NULL")
    )
    provider: Mapped[str] = mapped_column(String(32))
    model: Mapped[str] = mapped_column(String(100))
    prompt_tokens: Mapped[int] = mapped_column(default=0)
    completion_tokens: Mapped[int] = mapped_column(default=0)

    __table_args__ = (Index("idx_model_invocations_org_created", "org_id", "created_at"),)
