"""Prometheus metrics for kinderhub.

Provides metrics collection and exposure:
- HTTP request metrics (latency, count, in progress)
- Memory cache metrics (hits and misses per named cache)
- Cluster messaging metrics (sent, dropped, received)

Usage:
    from kinderhub.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.http_requests_total.labels(method="GET", path="/api/v4/kids/{id}", status=200).inc()
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from prometheus_client import REGISTRY, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from kinderhub.config import settings

if TYPE_CHECKING:
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# Entity ids are 26 lowercase alphanumerics
_ID_SEGMENT = re.compile(r"^[a-z0-9]{26}$")


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    # HTTP metrics
    http_requests_total: Any = None
    http_request_duration_seconds: Any = None
    http_requests_in_progress: Any = None

    # Memory cache metrics
    mem_cache_hits_total: Any = None
    mem_cache_misses_total: Any = None

    # Cluster metrics
    cluster_messages_sent_total: Any = None
    cluster_messages_dropped_total: Any = None
    cluster_messages_received_total: Any = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    def initialize(self) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self._registry = REGISTRY

        self.http_requests_total = Counter(
            "kinderhub_http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
        )
        self.http_request_duration_seconds = Histogram(
            "kinderhub_http_request_duration_seconds",
            "HTTP request latency in seconds",
            ["method", "path"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
        )
        self.http_requests_in_progress = Gauge(
            "kinderhub_http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method"],
        )

        self.mem_cache_hits_total = Counter(
            "kinderhub_mem_cache_hits_total",
            "Memory cache hits",
            ["cache_name"],
        )
        self.mem_cache_misses_total = Counter(
            "kinderhub_mem_cache_misses_total",
            "Memory cache misses",
            ["cache_name"],
        )

        self.cluster_messages_sent_total = Counter(
            "kinderhub_cluster_messages_sent_total",
            "Cluster messages published to peers",
            ["event"],
        )
        self.cluster_messages_dropped_total = Counter(
            "kinderhub_cluster_messages_dropped_total",
            "Cluster messages dropped (queue full or publish failure)",
            ["event", "reason"],
        )
        self.cluster_messages_received_total = Counter(
            "kinderhub_cluster_messages_received_total",
            "Cluster messages received from peers",
            ["event"],
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if not settings.enable_metrics or self._registry is None:
            return b"# Metrics disabled\n"
        return generate_latest(self._registry)


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry


def record_cache_hit(cache_name: str) -> None:
    metrics = get_metrics()
    if metrics.mem_cache_hits_total:
        metrics.mem_cache_hits_total.labels(cache_name=cache_name).inc()


def record_cache_miss(cache_name: str) -> None:
    metrics = get_metrics()
    if metrics.mem_cache_misses_total:
        metrics.mem_cache_misses_total.labels(cache_name=cache_name).inc()


def record_cluster_message_sent(event: str) -> None:
    metrics = get_metrics()
    if metrics.cluster_messages_sent_total:
        metrics.cluster_messages_sent_total.labels(event=event).inc()


def record_cluster_message_dropped(event: str, reason: str) -> None:
    metrics = get_metrics()
    if metrics.cluster_messages_dropped_total:
        metrics.cluster_messages_dropped_total.labels(event=event, reason=reason).inc()


def record_cluster_message_received(event: str) -> None:
    metrics = get_metrics()
    if metrics.cluster_messages_received_total:
        metrics.cluster_messages_received_total.labels(event=event).inc()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for HTTP request metrics.

    Records:
    - Request count by method, path, status
    - Request duration histogram
    - Requests in progress gauge
    """

    def __init__(self, app: "ASGIApp") -> None:
        super().__init__(app)
        self.metrics = get_metrics()

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        if request.url.path in ("/health/live", "/health/ready", "/metrics"):
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        if self.metrics.http_requests_in_progress:
            self.metrics.http_requests_in_progress.labels(method=method).inc()

        start_time = time.perf_counter()
        status_code = 500  # Default in case of exception

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time

            if self.metrics.http_requests_total:
                self.metrics.http_requests_total.labels(
                    method=method,
                    path=path,
                    status=status_code,
                ).inc()

            if self.metrics.http_request_duration_seconds:
                self.metrics.http_request_duration_seconds.labels(
                    method=method,
                    path=path,
                ).observe(duration)

            if self.metrics.http_requests_in_progress:
                self.metrics.http_requests_in_progress.labels(method=method).dec()


def normalize_path(path: str) -> str:
    """Replace entity ids with a placeholder to keep label cardinality low.

    Examples:
        /api/v4/kids/q8h4... -> /api/v4/kids/{id}
        /api/v4/schools/q8h4.../classes -> /api/v4/schools/{id}/classes
    """
    parts = path.strip("/").split("/")
    if parts == [""]:
        return path
    return "/" + "/".join("{id}" if _ID_SEGMENT.match(part) else part for part in parts)
