"""
Request logging middleware.

Logs command and download requests with timing information.
"""

import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests with timing information.

    Every response carries ``X-Request-ID`` (taken from the request or
    generated) and ``X-Process-Time`` in milliseconds. Health probes are
    not logged.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        logger_instance: logging.Logger | None = None,
        skip_paths: set[str] | None = None,
    ) -> None:
        """
        Initialize the logging middleware.

        Args:
            app: ASGI application
            logger_instance: Custom logger instance
            skip_paths: Path prefixes to skip logging for (default: /health)
        """
        super().__init__(app)
        self._logger = logger_instance or logger
        self._skip_paths = skip_paths if skip_paths is not None else {"/health"}

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(prefix) for prefix in self._skip_paths)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """
        Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/route handler

        Returns:
            Response from downstream handlers
        """
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        path = request.url.path
        log_enabled = self._should_log(path)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self._logger.error(
                "Request failed",
                extra={
                    "event": "request_failed",
                    "method": request.method,
                    "path": path,
                    "request_id": request_id,
                    "error": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        if log_enabled:
            self._logger.info(
                f"{request.method} {path} -> {response.status_code} ({duration_ms:.2f} ms)",
                extra={
                    "event": "request_completed",
                    "method": request.method,
                    "path": path,
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            )

        response.headers["X-Process-Time"] = f"{duration_ms:.2f}"
        response.headers["X-Request-ID"] = request_id
        return response
