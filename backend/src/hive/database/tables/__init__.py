"""Importing this package registers every table on ``Base.metadata``."""

from hive.database.tables.audit_log_table import AuditLogs
from hive.database.tables.base_class import Base
from hive.database.tables.org_table import OrgMembers, Orgs
from hive.database.tables.tenant_settings_table import TenantSettings
from hive.database.tables.thread_table import Messages, ModelInvocations, Threads

__all__ = [
    "AuditLogs",
    "Base",
    "Messages",
    "ModelInvocations",
    "OrgMembers",
    "Orgs",
    "TenantSettings",
    "Threads",
]
