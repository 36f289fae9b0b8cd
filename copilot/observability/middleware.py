"""
HTTP request logging middleware.

Logs every request with its status and duration and echoes a
correlation id header, generating one when the caller sent none.

Dependencies: fastapi, starlette
System role: Request/response observability
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """
        Log request and response with timing.

        Args:
            request: Incoming request
            call_next: Next handler in the chain

        Returns:
            Response: Handler response carrying the correlation id header
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        started = time.perf_counter()
        method, path = request.method, request.url.path

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} - Unhandled {type(e).__name__}",
                extra={
                    "correlation_id": correlation_id,
                    "process_time_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            raise

        logger.info(
            f"{method} {path} - {response.status_code}",
            extra={
                "correlation_id": correlation_id,
                "status_code": response.status_code,
                "process_time_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
