from fastapi import FastAPI
from fastapi.responses import JSONResponse

from hive.main.exceptions import EXCEPTION_MAP
from hive.main.logging import get_logger
from hive.main.models import GeneralError

logger = get_logger(__name__)


def add_exception_handlers(app: FastAPI):
    for exception, (status_code, error_message, error_code) in EXCEPTION_MAP.items():

        def handler(
            request,
            exc,
            status_code=status_code,
            error_message=error_message,
            error_code=error_code,
        ):
            message = error_message or str(exc)

            if status_code in (401, 403):
                logger.info(
                    f"[Auth] Request rejected: {request.method} {request.url.path} - {str(exc)}",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": status_code,
                        "error_code": int(error_code),
                        "client_host": request.client.host if request.client else "unknown",
                    },
                )

            return JSONResponse(
                status_code=status_code,
                content=GeneralError(message=message, error_code=error_code).model_dump(),
            )

        app.add_exception_handler(exception, handler)
