"""Prometheus middleware for HTTP request and error metrics."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..routes_metrics import http_errors_total, http_requests_total


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Increment HTTP request counters and, for 4xx/5xx, the error counter."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # Label by route template so /api/orders/{order_id}/status stays one series
        route = request.scope.get("route")
        route_path = route.path if route else request.url.path
        status = str(response.status_code)
        http_requests_total.labels(path=route_path, method=request.method, status=status).inc()
        if 400 <= response.status_code < 600:
            http_errors_total.labels(status=status).inc()
        return response
