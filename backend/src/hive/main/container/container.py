from dependency_injector import containers, providers
from sqlalchemy.ext.asyncio import AsyncSession

from hive.audit.audit_log_repo import AuditLogRepository
from hive.main.config import get_settings
from hive.orgs.membership_repo import MembershipRepository
from hive.orgs.org_repo import OrgRepository
from hive.retention.batch_deleter import BatchDeleter
from hive.retention.batch_selector import BatchSelector
from hive.retention.purge_service import RetentionPurgeService
from hive.retention.retention_repo import RetentionRepository
from hive.tenant_settings.tenant_settings_repo import TenantSettingsRepository
from hive.tenant_settings.tenant_settings_service import TenantSettingsService


class Container(containers.DeclarativeContainer):
    """Object graph for one database session.

    Build one per session: ``Container(session=providers.Object(session))``.
    """

    session = providers.Dependency(instance_of=AsyncSession)
    settings = providers.Callable(get_settings)

    # Repositories
    org_repo = providers.Factory(OrgRepository, session=session)
    membership_repo = providers.Factory(MembershipRepository, session=session)
    audit_log_repo = providers.Factory(AuditLogRepository, session=session)
    tenant_settings_repo = providers.Factory(TenantSettingsRepository, session=session)
    retention_repo = providers.Factory(RetentionRepository, session=session)

    # Services
    tenant_settings_service = providers.Factory(
        TenantSettingsService,
        tenant_settings_repo=tenant_settings_repo,
        default_providers=settings.provided.default_enabled_providers,
        membership_repo=membership_repo,
        audit_log_repo=audit_log_repo,
    )
    batch_selector = providers.Factory(
        BatchSelector,
        retention_repo=retention_repo,
        page_size=settings.provided.retention_select_chunk,
    )
    batch_deleter = providers.Factory(
        BatchDeleter,
        retention_repo=retention_repo,
        chunk_size=settings.provided.retention_select_chunk,
    )
    retention_purge_service = providers.Factory(
        RetentionPurgeService,
        session=session,
        tenant_settings_service=tenant_settings_service,
        batch_selector=batch_selector,
        batch_deleter=batch_deleter,
        audit_log_repo=audit_log_repo,
        batch_size=settings.provided.retention_batch_size,
    )
