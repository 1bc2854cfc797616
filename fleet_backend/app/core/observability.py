"""
Request observability middleware.

Adds a correlation ID to every request and logs method, path, status and
duration.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-ID"

logger = logging.getLogger("fleet_backend.requests")


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER, str(uuid.uuid4()))

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = (time.perf_counter() - start_time) * 1000  # ms

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Process-Time"] = f"{process_time:.2f}"

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(process_time, 2),
        }

        if response.status_code >= 500:
            logger.error("%s %s failed with %s", request.method, request.url.path, response.status_code, extra=log_data)
        elif response.status_code >= 400:
            logger.warning("%s %s returned %s", request.method, request.url.path, response.status_code, extra=log_data)
        else:
            logger.info(
                "%s %s %s (%.2f ms)",
                request.method, request.url.path, response.status_code, process_time,
                extra=log_data,
            )

        return response
