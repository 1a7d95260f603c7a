"""
SeatFlow - Prometheus Metrics
Request latency, seat selection outcomes, active selection sessions

Metrics:
- http_requests_total: Total HTTP requests
- http_request_duration_seconds: Request latency histogram
- seatflow_seat_selections_total: Select / deselect calls by outcome
- seatflow_active_sessions: Current seat selection sessions
"""

import re
import time
import logging
from typing import Callable
from contextlib import contextmanager

from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY
)
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("SeatFlow-Metrics")

# ═══════════════════════════════════════════════════════════════════
# METRIC DEFINITIONS
# ═══════════════════════════════════════════════════════════════════

# HTTP Metrics
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Selection Metrics
SEAT_SELECTIONS = Counter(
    "seatflow_seat_selections_total",
    "Seat selection calls",
    ["action", "status"]  # action: select / deselect, status: ok / rejected code
)

# Session Metrics
ACTIVE_SESSIONS = Gauge(
    "seatflow_active_sessions",
    "Number of active seat selection sessions"
)


# ═══════════════════════════════════════════════════════════════════
# MIDDLEWARE
# ═══════════════════════════════════════════════════════════════════

class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for automatic request metrics
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = normalize_path(request.url.path)

        start_time = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            status = str(response.status_code)
        finally:
            duration = time.perf_counter() - start_time

            HTTP_REQUESTS_TOTAL.labels(
                method=method,
                endpoint=endpoint,
                status=status
            ).inc()

            HTTP_REQUEST_DURATION.labels(
                method=method,
                endpoint=endpoint
            ).observe(duration)

        return response


def normalize_path(path: str) -> str:
    """
    Normalize path by replacing IDs with placeholders
    /api/v1/seatmaps/sessions/3f2a.../segments/0/seats/12A
        → /api/v1/seatmaps/sessions/{session}/segments/{id}/seats/{seat}
    """
    # Session ids (uuid4 hex)
    path = re.sub(r'/[0-9a-f]{32}(?=/|$)', '/{session}', path)

    # Seat numbers (row digits + column letter)
    path = re.sub(r'/seats/\d+[A-Za-z]+(?=/|$)', '/seats/{seat}', path)

    # Numeric IDs
    path = re.sub(r'/\d+(?=/|$)', '/{id}', path)

    return path


# ═══════════════════════════════════════════════════════════════════
# CONTEXT MANAGERS
# ═══════════════════════════════════════════════════════════════════

@contextmanager
def track_selection(action: str):
    """
    Context manager to count selection outcomes

    Usage:
        with track_selection("select"):
            engine.select(0, "1", "12A")
    """
    status = "ok"

    try:
        yield
    except Exception as e:
        status = getattr(e, "code", "error")
        raise
    finally:
        SEAT_SELECTIONS.labels(action=action, status=status).inc()


def set_active_sessions(count: int):
    """Set active session count directly"""
    ACTIVE_SESSIONS.set(count)


# ═══════════════════════════════════════════════════════════════════
# METRICS ENDPOINT
# ═══════════════════════════════════════════════════════════════════

async def metrics_endpoint():
    """
    Prometheus metrics endpoint
    Returns metrics in Prometheus text format
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )


def setup_metrics(app):
    """
    Setup Prometheus metrics for FastAPI app

    Usage in main.py:
        from seatflow.core.metrics import setup_metrics
        setup_metrics(app)
    """
    app.add_middleware(PrometheusMiddleware)
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["Monitoring"])

    logger.info("✅ Prometheus metrics enabled at /metrics")
