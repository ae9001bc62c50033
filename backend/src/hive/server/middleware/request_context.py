import uuid

from starlette.middleware.base import BaseHTTPMiddleware

from hive.main.request_context import clear_request_context, set_request_context

CORRELATION_ID_HEADER = "X-Correlation-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Gives every request a correlation id, picked up by the JSON log formatter."""

    async def dispatch(self, request, call_next):
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
        set_request_context(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        finally:
            clear_request_context()

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
