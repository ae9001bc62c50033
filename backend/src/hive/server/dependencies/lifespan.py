from contextlib import asynccontextmanager

from fastapi import FastAPI

from hive.database.database import DatabaseSessionManager
from hive.main.aiohttp_client import aiohttp_client
from hive.main.config import get_settings
from hive.main.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    yield
    await shutdown(app)


async def startup(app: FastAPI):
    settings = get_settings()

    aiohttp_client.start()

    sessionmanager = DatabaseSessionManager()
    sessionmanager.init(settings.database_url)
    app.state.sessionmanager = sessionmanager

    logger.info(
        "Backend started",
        extra={"version": settings.app_version, "retention_dry_run": settings.retention_dry_run},
    )


async def shutdown(app: FastAPI):
    sessionmanager: DatabaseSessionManager | None = getattr(app.state, "sessionmanager", None)
    if sessionmanager is not None:
        await sessionmanager.close()

    await aiohttp_client.stop()
