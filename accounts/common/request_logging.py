"""Middleware for logging every request with its final response status."""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and duration of each request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        client_ip = request.client.host if request.client else "unknown"
        logger.info(
            f"{client_ip} {request.method} {request.url.path} "
            f"{response.status_code} {elapsed_ms:.1f}ms"
        )
        return response
