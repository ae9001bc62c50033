"""Constants for the tenant data-retention engine."""

import math

# Tenant-configurable retention window (days)
MIN_RETENTION_DAYS = 1
MAX_RETENTION_DAYS = 3650
DEFAULT_RETENTION_DAYS = 90

# Guardrails
FLOOR_DAYS = 30  # effective window never goes below this, whatever is stored
AUDIT_PURGE_DAYS = 365  # fixed, not tenant configurable

# Batching
BATCH_SIZE = 5000  # ids selected per orchestrator batch
SELECT_CHUNK = 1000  # page size for selects and chunk size for deletes
ORG_PAGE_SIZE = 200

PURGE_RUN_ACTION = "retention.purge_run"
PURGE_RUN_TARGET_TYPE = "retention"


def clamp_retention(days) -> int:
    """Return the retention window actually used for deletion.

    Missing, zero or non-numeric values count as the floor.
    """
    try:
        value = float(days)
    except (TypeError, ValueError):
        return FLOOR_DAYS

    if not math.isfinite(value) or value == 0:
        return FLOOR_DAYS

    return max(FLOOR_DAYS, math.floor(value))
