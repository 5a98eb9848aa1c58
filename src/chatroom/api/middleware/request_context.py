"""Per-request correlation id and timing log.

The id comes from the caller's ``X-Request-ID`` header or is minted here. It
is echoed on the response and exposed to log records through
``CorrelationIdFilter`` so every line logged while serving a request can be
traced back to it.
"""
from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")

HEADER = "X-Request-ID"


class CorrelationIdFilter(logging.Filter):
    """Adds ``correlation_id`` to every record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get() or "-"
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        cid = request.headers.get(HEADER) or uuid.uuid4().hex
        token = correlation_id_ctx.set(cid)
        # the 500 handler runs after the context var is reset
        request.state.correlation_id = cid
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[HEADER] = cid
            return response
        finally:
            logger.info(
                "%s %s %s %.1fms",
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - start) * 1000,
            )
            correlation_id_ctx.reset(token)
