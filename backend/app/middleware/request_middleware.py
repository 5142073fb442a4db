"""
Request Middleware Module
=========================

Starlette middleware for request processing.

Features:
- Request ID generation for tracing
- Request timing
- Completion logging
- Security headers

Note:
    Authentication is not performed here. Tokens are verified in the
    dependency layer (app.core.dependencies.auth).
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import settings
from app.core.logging import get_logger, LogContext

# Initialize logger
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Request context middleware.

    Responsibilities:
    - Assign a request ID (reusing the caller's X-Request-ID if sent)
    - Bind the request ID to the logging context
    - Add X-Request-ID and X-Process-Time response headers
    - Log completed requests
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        # Initialize request state
        request.state.request_id = request_id
        request.state.user_id = None

        start_time = time.perf_counter()

        with LogContext(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "request_processing_error",
                    error=str(e),
                    path=request.url.path,
                    method=request.method,
                )
                raise

            process_time = time.perf_counter() - start_time

            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            self._log_request(request, response, process_time)

        return response

    def _log_request(
        self,
        request: Request,
        response: Response,
        process_time: float,
    ) -> None:
        # Don't log health checks
        if request.url.path in ("/", "/health", "/ready"):
            return

        log_data = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round(process_time * 1000, 2),
            "user_id": getattr(request.state, "user_id", None),
            "ip_address": request.client.host if request.client else None,
        }

        # Log based on status code
        if response.status_code >= 500:
            logger.error("request_completed_with_error", **log_data)
        elif response.status_code >= 400:
            logger.warning("request_completed_with_client_error", **log_data)
        else:
            logger.info("request_completed", **log_data)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff
    - X-Frame-Options: DENY
    - Referrer-Policy
    - Content-Security-Policy
    - Strict-Transport-Security (in production)
    """

    # Paths that serve Swagger / ReDoc UI assets
    _DOCS_PATHS = {"/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # Swagger UI and ReDoc load assets from cdn.jsdelivr.net
        if settings.DEBUG and request.url.path in self._DOCS_PATHS:
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "img-src 'self' data: https://fastapi.tiangolo.com; "
                "frame-ancestors 'none';"
            )
        else:
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "img-src 'self' data:; "
                "frame-ancestors 'none';"
            )

        if settings.ENVIRONMENT == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response
