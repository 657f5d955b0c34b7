"""Request logging and correlation ID propagation.

The X-Correlation-ID header (or a fresh UUID) becomes the correlation ID
for everything the request triggers, including the pipeline run and its
seat tasks, and is echoed back in the response.

Health and metrics probes are logged at debug level so scrapes do not
drown out governance traffic.
"""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from govproof.infrastructure.observability.correlation import (
    generate_correlation_id,
    set_correlation_id,
)

CORRELATION_HEADER = "X-Correlation-ID"

PROBE_PATHS = frozenset({"/v1/health", "/v1/metrics"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds the correlation ID and logs each request with its duration."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        set_correlation_id(correlation_id)

        log = structlog.get_logger().bind(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )
        emit = log.debug if request.url.path in PROBE_PATHS else log.info
        emit("request_started")
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            log.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error_type=type(exc).__name__,
            )
            raise

        emit(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
