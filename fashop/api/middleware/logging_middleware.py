"""
Request logging middleware.

Logs one line per request and response with a correlation id that is
echoed back in ``X-Correlation-ID``.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Adds a correlation id to ``request.state`` and logs method, path,
    status and duration. Health checks are not logged.
    """

    QUIET_PATHS: tuple[str, ...] = ("/health", "/favicon.ico")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:8]
        request.state.correlation_id = correlation_id

        if request.url.path.startswith(self.QUIET_PATHS):
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        started = time.perf_counter()
        logger.info(f"[{correlation_id}] --> {request.method} {request.url.path} from {self._client_ip(request)}")

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{correlation_id}] <-- {request.method} {request.url.path} failed in {elapsed_ms:.1f}ms: {e}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            logging.WARNING if response.status_code >= 400 else logging.INFO,
            f"[{correlation_id}] <-- {request.method} {request.url.path} {response.status_code} in {elapsed_ms:.1f}ms",
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.1f}"
        return response

    @staticmethod
    def _client_ip(request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
