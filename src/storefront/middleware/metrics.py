"""Prometheus metrics middleware for request and checkout monitoring."""
import time
from typing import Callable

from prometheus_client import Counter, Gauge, Histogram, generate_latest
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


# =============================================================================
# Prometheus Metrics Definitions
# =============================================================================

# Request metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_requests_active",
    "Number of active HTTP requests",
)

# Checkout metrics
CHECKOUT_COUNTER = Counter(
    "checkouts_total",
    "Total checkout attempts",
    ["status"],  # success, rejected, error
)

# Database metrics
DB_QUERY_LATENCY = Histogram(
    "db_query_duration_seconds",
    "Database query latency in seconds",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)


# =============================================================================
# Metrics Middleware
# =============================================================================

class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for all HTTP requests."""

    # Endpoints to normalize for metrics (reduce cardinality)
    ENDPOINT_PATTERNS = {
        "/api/v1/products": "/api/v1/products",
        "/api/v1/admin": "/api/v1/admin",
        "/api/v1/cart": "/api/v1/cart",
        "/api/v1/orders/checkout": "/api/v1/orders/checkout",
        "/api/v1/orders": "/api/v1/orders",
        "/api/v1/uploads": "/api/v1/uploads",
        "/api/v1/me": "/api/v1/me",
    }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        ACTIVE_REQUESTS.inc()
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            ACTIVE_REQUESTS.dec()
            latency = time.perf_counter() - start_time
            endpoint = self._normalize_endpoint(request.url.path)

            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status=status_code,
            ).inc()

            REQUEST_LATENCY.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(latency)

            if endpoint == "/api/v1/orders/checkout" and request.method == "POST":
                if status_code in (200, 201):
                    CHECKOUT_COUNTER.labels(status="success").inc()
                elif status_code >= 500:
                    CHECKOUT_COUNTER.labels(status="error").inc()
                else:
                    CHECKOUT_COUNTER.labels(status="rejected").inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce metric cardinality."""
        for pattern, normalized in self.ENDPOINT_PATTERNS.items():
            if path.startswith(pattern):
                return normalized

        if path in ("/health", "/metrics"):
            return path

        return "/other"


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics scrape endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


def record_db_query(operation: str, duration: float) -> None:
    """Record database query latency."""
    DB_QUERY_LATENCY.labels(operation=operation).observe(duration)
