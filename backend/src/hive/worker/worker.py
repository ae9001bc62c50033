from __future__ import annotations

from functools import wraps

from arq.connections import RedisSettings
from arq.cron import cron
from dependency_injector import providers

from hive.database.database import DatabaseSessionManager
from hive.main.aiohttp_client import aiohttp_client
from hive.main.config import get_settings
from hive.main.container.container import Container
from hive.main.logging import get_logger

logger = get_logger(__name__)


class Worker:
    """Collects arq functions and cron jobs and owns the worker's resources.

    Functions registered with ``function`` get a fresh ``Container`` bound to
    their own database session. Cron jobs registered with ``cron_job`` get
    none; they are expected to call the API.
    """

    def __init__(self):
        settings = get_settings()
        self.functions = []
        self.cron_jobs = []
        self.redis_settings = RedisSettings(host=settings.redis_host, port=settings.redis_port)
        self.on_startup = self.startup
        self.on_shutdown = self.shutdown
        self.retry_jobs = False
        # A full pass over all orgs may take a while
        self.job_timeout = 60 * 60
        self.max_jobs = settings.worker_max_jobs
        self.health_check_interval = 60

    async def startup(self, ctx):
        settings = get_settings()

        aiohttp_client.start()

        sessionmanager = DatabaseSessionManager()
        sessionmanager.init(settings.database_url)
        ctx["sessionmanager"] = sessionmanager

        logger.info("Worker started", extra={"cron_jobs": len(self.cron_jobs)})

    async def shutdown(self, ctx):
        sessionmanager: DatabaseSessionManager | None = ctx.get("sessionmanager")
        if sessionmanager is not None:
            await sessionmanager.close()

        await aiohttp_client.stop()

    def function(self):
        def decorator(func):
            @wraps(func)
            async def wrapper(ctx, *args, **kwargs):
                logger.debug(f"Executing {func.__name__}", extra={"job_id": ctx.get("job_id")})

                sessionmanager: DatabaseSessionManager = ctx["sessionmanager"]
                async with sessionmanager.session() as session:
                    container = Container(session=providers.Object(session))
                    return await func(*args, container=container, **kwargs)

            self.functions.append(wrapper)
            return wrapper

        return decorator

    def cron_job(self, **decorator_kwargs):
        def decorator(func):
            @wraps(func)
            async def wrapper(ctx):
                logger.debug(f"Executing {func.__name__}")
                return await func()

            self.cron_jobs.append(cron(wrapper, **decorator_kwargs))
            return wrapper

        return decorator

    def include_subworker(self, sub_worker: Worker):
        self.functions.extend(sub_worker.functions)
        self.cron_jobs.extend(sub_worker.cron_jobs)
