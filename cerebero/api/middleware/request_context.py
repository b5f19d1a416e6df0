"""
Request Context Middleware

Binds a request id (taken from ``X-Request-ID`` or generated) plus method and
path into the structlog context, so every log line of a request carries
them. The id is echoed back in the response header.
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from cerebero.shared.core.logging import clear_log_context, log_context, logger


REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        clear_log_context()
        log_context(request_id=request_id, method=request.method, path=request.url.path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 1)
            logger.debug("request_finished", duration_ms=duration_ms)
            clear_log_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
