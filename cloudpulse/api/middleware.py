"""
API Middleware - Request Tracking, Response Headers

Middleware for the dashboard FastAPI application:
- Request ID tracking and request/response logging
- CORS and cache headers on JSON API responses
"""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from cloudpulse.core import get_logger

logger = get_logger(__name__)

API_PREFIX = "/api/"


# ============================================================
# Request ID Middleware
# ============================================================


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Add unique request ID to each request for tracing and debugging.

    Adds X-Request-ID header to the response and logs every API call with
    its status and duration. Static asset requests are logged at DEBUG.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id

        log = logger.info if request.url.path.startswith(API_PREFIX) else logger.debug
        log(
            "HTTP request",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        return response


# ============================================================
# API Headers Middleware
# ============================================================


class ApiHeadersMiddleware(BaseHTTPMiddleware):
    """
    Open CORS and disable caching for JSON API responses.

    The dashboard polls the API; every response must reflect the latest
    CloudWatch and GitHub data, so nothing under /api/ is cacheable.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if request.url.path.startswith(API_PREFIX):
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Cache-Control"] = "no-cache, must-revalidate"

        return response
