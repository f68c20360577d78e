"""Request timing middleware feeding the performance monitor."""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from fittrack.services.performance import get_performance_monitor


def endpoint_path(request: Request) -> str:
    """Route template (/api/v1/workouts/{workout_id}) when matched, else the raw path."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path


class PerformanceMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        monitor = get_performance_monitor()
        try:
            response = await call_next(request)
        except Exception:
            monitor.record_request(
                request.method, endpoint_path(request), 500, (time.perf_counter() - start) * 1000
            )
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        monitor.record_request(request.method, endpoint_path(request), response.status_code, duration_ms)
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.1f}"
        return response
