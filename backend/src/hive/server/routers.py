from fastapi import APIRouter

from hive.retention.retention_router import router as retention_router
from hive.tenant_settings.tenant_settings_router import router as tenant_settings_router

router = APIRouter()

router.include_router(retention_router, tags=["retention"])
router.include_router(tenant_settings_router, tags=["tenant-settings"])
