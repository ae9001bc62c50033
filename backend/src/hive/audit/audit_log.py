from typing import Any, Optional
from uuid import UUID

from pydantic import Field

from hive.main.models import InDB


class AuditLogInDB(InDB):
    org_id: UUID
    actor_id: Optional[UUID] = None
    action: str
    target_type: str
    target_id: Optional[str] = None
    content_sha256: Optional[str] = None
    meta: dict[str, Any] = Field(default_factory=dict)
