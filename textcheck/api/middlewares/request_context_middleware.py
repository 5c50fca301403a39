"""
Middleware binding a correlation id to every request for structured logs.
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from textcheck.core.logging import (
    bind_request_id,
    generate_request_id,
    get_logger,
    unbind_request_id,
)

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Reads or generates the request id, exposes it to the logging context and
    echoes it back in the response headers.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        bind_request_id(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            logger.info(
                "request_completed",
                path=request.url.path,
                method=request.method,
                status_code=response.status_code,
                duration_ms=int((time.perf_counter() - started) * 1000),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            unbind_request_id()
