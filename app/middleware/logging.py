"""Request logging middleware."""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Polled by load balancers; logged at DEBUG only
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid4())
        request.state.request_id = request_id
        log = logger.debug if request.url.path in QUIET_PATHS else logger.info

        start_time = time.perf_counter()
        log(
            f"[REQUEST {request_id}] {request.method} {request.url.path} started",
            extra={
                "request_id": request_id,
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                f"[REQUEST {request_id}] {request.method} {request.url.path} failed after {duration_ms}ms: {e}"
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        log(
            f"[REQUEST {request_id}] {request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)"
        )

        response.headers["X-Request-ID"] = request_id
        return response
