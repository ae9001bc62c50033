from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RetentionTarget(str, Enum):
    MESSAGES = "messages"
    MODEL_INVOCATIONS = "model_invocations"
    AUDIT_LOGS = "audit_logs"
    THREADS = "threads"


@dataclass(frozen=True)
class SelectionFilter:
    """What to select for one tenant.

    Either ``cutoff`` (rows created at or before it) or ``orphan_threads``.
    """

    org_id: UUID
    cutoff: Optional[datetime] = None
    orphan_threads: bool = False


class PurgeCounts(BaseModel):
    messages: int = 0
    model_invocations: int = 0
    threads: int = 0
    audit_logs: int = 0

    def add(self, target: RetentionTarget, count: int) -> None:
        setattr(self, target.value, getattr(self, target.value) + count)


class PurgeSummary(BaseModel):
    """Outcome of one orchestrator run for one tenant.

    Serialized by alias: this is both the API payload and the audit ``meta``.
    """

    model_config = ConfigDict(populate_by_name=True)

    skipped_for_legal_hold: bool = Field(alias="skippedForLegalHold")
    dry_run: bool = Field(default=False, alias="dryRun")
    counts: PurgeCounts
    retention_days_effective: int = Field(alias="retentionDaysEffective")
    batch_size: int = Field(alias="batchSize")
    window_end_utc: datetime = Field(alias="windowEndUTC")

    def to_meta(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class PurgeFailure(BaseModel):
    error: str


class RunAllResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    dry_run: bool = Field(alias="dryRun")
    results: dict[str, Union[PurgeSummary, PurgeFailure]]
