from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from hive.main.config import get_settings
from hive.main.logging import get_logger
from hive.server import api_documentation
from hive.server.dependencies.lifespan import lifespan
from hive.server.exception_handlers import add_exception_handlers
from hive.server.middleware.request_context import RequestContextMiddleware
from hive.server.routers import router as api_router
from hive.worker.redis import get_worker_health

logger = get_logger(__name__)


def get_application():
    app = FastAPI(lifespan=lifespan)

    app.add_middleware(RequestContextMiddleware)

    app.include_router(api_router, prefix=get_settings().api_prefix)

    # Add handlers of all errors except 500
    add_exception_handlers(app)

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        app.openapi_schema = get_openapi(
            title=api_documentation.TITLE,
            version=get_settings().app_version,
            description=api_documentation.SUMMARY,
            tags=api_documentation.TAGS_METADATA,
            routes=app.routes,
        )
        return app.openapi_schema

    app.openapi = custom_openapi

    @app.exception_handler(500)
    async def custom_http_500_exception_handler(request, exc):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
            extra={"status_code": 500},
        )
        return JSONResponse(status_code=500, content={"error": "Something went wrong"})

    @app.get("/api/healthz")
    async def get_healthz():
        worker_health = await get_worker_health()

        # Backend is always healthy if we can respond
        backend_status = "HEALTHY"
        now = datetime.now(timezone.utc).isoformat()

        overall_status = "HEALTHY" if worker_health.status == "HEALTHY" else "UNHEALTHY"

        detail = {
            "status": overall_status,
            "timestamp": now,
            "backend": {
                "status": backend_status,
                "last_heartbeat": now,
                "details": "Backend API server operational",
            },
            "worker": {
                "status": worker_health.status,
                "last_heartbeat": worker_health.last_heartbeat,
                "details": worker_health.details,
            },
        }

        if overall_status != "HEALTHY":
            raise HTTPException(status_code=503, detail=detail)

        return {"detail": detail}

    return app


app = get_application()


def start():
    uvicorn.run(
        "hive.server.main:app",
        host="0.0.0.0",
        port=8123,
        reload=get_settings().dev,
        reload_dirs="./src/",
    )
