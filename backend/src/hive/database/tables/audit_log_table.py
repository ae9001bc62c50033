"""Database table for audit logs."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hive.database.tables.base_class import BasePublic


class AuditLogs(BasePublic):
    __tablename__ = "audit_logs"

    org_id: Mapped[UUID] = mapped_column(ForeignKey("orgs.id", ondelete="CASCADE"))

    # None for system (cron) actions
    actor_id: Mapped[Optional[UUID]] = mapped_column()

    action: Mapped[str] = mapped_column(String(100))
    target_type: Mapped[str] = mapped_column(String(50))
    target_id: Mapped[Optional[str]] = mapped_column(String(255))
    content_sha256: Mapped[Optional[str]] = mapped_column(String(64))
    meta: Mapped[dict[str, Any]] = mapped_column(default=dict)

    __table_args__ = (
        Index("idx_audit_logs_org_created", "org_id", "created_at"),
        Index("idx_audit_logs_org_action", "org_id", "action", "created_at"),
    )
