# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, generate_latest

# Counters
http_requests_total = Counter(
    "http_requests_total", "Total HTTP requests", ["path", "method", "status"]
)
http_errors_total = Counter("http_errors_total", "Total HTTP errors", ["status"])

orders_created_total = Counter("orders_created_total", "Total orders created")
orders_created_total.inc(0)

order_status_changes_total = Counter(
    "order_status_changes_total", "Total order status transitions", ["status"]
)

ws_messages_total = Counter("ws_messages_total", "Total WebSocket messages sent")
ws_messages_total.inc(0)

ws_events_dropped_total = Counter(
    "ws_events_dropped_total", "Events dropped because an endpoint queue was full"
)
ws_events_dropped_total.inc(0)

# Gauges
ws_clients_gauge = Gauge("ws_clients", "Connected WebSocket clients")

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose Prometheus metrics."""

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
