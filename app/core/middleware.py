"""
Request logging middleware.

Logs one access line per request with status and duration, and warns when
a request is still running after the slow-request threshold. The warning
is observability only; the request is never aborted.
"""

import asyncio
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, slow_threshold_ms: int = 500):
        super().__init__(app)
        self.slow_threshold_ms = slow_threshold_ms

    async def _warn_when_slow(self, method: str, path: str) -> None:
        await asyncio.sleep(self.slow_threshold_ms / 1000)
        logger.warning(f"{method} {path} is still running after {self.slow_threshold_ms}ms")

    async def dispatch(self, request: Request, call_next):
        method = request.method
        path = request.url.path
        start = time.perf_counter()

        watchdog = asyncio.create_task(self._warn_when_slow(method, path))
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(f"{method} {path} -> unhandled error ({duration_ms:.1f}ms)")
            raise
        finally:
            watchdog.cancel()

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{method} {path} -> {response.status_code} ({duration_ms:.1f}ms)")
        return response
