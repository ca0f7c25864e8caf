"""Performance monitoring middleware for tracking request metrics."""

import logging
import threading
import time
from typing import Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class PerformanceMetrics:
    """Request counters shared across the process."""

    def __init__(self, slow_threshold: float = 2.0, very_slow_threshold: float = 10.0):
        self.slow_threshold = slow_threshold
        self.very_slow_threshold = very_slow_threshold
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self.request_count = 0
            self.total_duration = 0.0
            self.slow_requests = 0
            self.very_slow_requests = 0
            self.errors = 0

    def record_request(self, duration: float, is_error: bool = False) -> None:
        """
        Record a request metric.

        Args:
            duration: Request duration in seconds
            is_error: Whether the request ended in a 5xx or an exception
        """
        with self._lock:
            self.request_count += 1
            self.total_duration += duration
            if is_error:
                self.errors += 1
            if duration >= self.very_slow_threshold:
                self.very_slow_requests += 1
            elif duration >= self.slow_threshold:
                self.slow_requests += 1

    def get_summary(self) -> Dict[str, float]:
        """
        Get performance metrics summary.

        Returns:
            Dictionary with performance metrics
        """
        with self._lock:
            count = self.request_count
            average_ms = (self.total_duration / count) * 1000 if count else 0.0
            return {
                "total_requests": count,
                "average_duration_ms": round(average_ms, 2),
                "slow_requests": self.slow_requests,
                "very_slow_requests": self.very_slow_requests,
                "slow_request_percentage": round((self.slow_requests / count) * 100, 2) if count else 0.0,
                "errors": self.errors,
                "error_rate": round((self.errors / count) * 100, 2) if count else 0.0,
            }


# Global metrics instance
metrics = PerformanceMetrics()


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for tracking and logging request performance metrics."""

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold: float = 2.0,
        very_slow_request_threshold: float = 10.0,
    ):
        """
        Initialize performance middleware.

        Generation routinely takes several seconds, so the thresholds sit higher
        than for a plain CRUD API.

        Args:
            app: ASGI application
            slow_request_threshold: Threshold in seconds for slow request warning
            very_slow_request_threshold: Threshold in seconds for very slow request error
        """
        super().__init__(app)
        self.slow_threshold = slow_request_threshold
        self.very_slow_threshold = very_slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            metrics.record_request(duration, is_error=True)
            logger.error(
                f"Request failed: {method} {path}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": round(duration * 1000, 2),
                    "error": str(e),
                },
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start_time
        duration_ms = round(duration * 1000, 2)
        metrics.record_request(duration, is_error=response.status_code >= 500)

        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        log_data = {
            "request_id": request_id,
            "method": method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        if duration >= self.very_slow_threshold:
            logger.error(f"VERY SLOW REQUEST: {method} {path} took {duration_ms}ms", extra=log_data)
        elif duration >= self.slow_threshold:
            logger.warning(f"Slow request: {method} {path} took {duration_ms}ms", extra=log_data)
        else:
            logger.debug(f"Request completed: {method} {path}", extra=log_data)

        return response
