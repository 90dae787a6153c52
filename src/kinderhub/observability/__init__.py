"""Observability module for kinderhub.

Provides tracing, metrics, and structured logging:
- OpenTelemetry tracing with OTLP export
- Prometheus metrics for HTTP requests, memory caches and cluster messaging
- JSON structured logging with correlation IDs
"""

from kinderhub.observability.logging import (
    configure_logging,
    correlation_id_var,
    request_id_var,
    user_id_var,
)
from kinderhub.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    metrics_registry,
)
from kinderhub.observability.tracing import (
    TracingMiddleware,
    get_tracer,
    setup_tracing,
    shutdown_tracing,
)

__all__ = [
    # Logging
    "configure_logging",
    "request_id_var",
    "correlation_id_var",
    "user_id_var",
    # Tracing
    "setup_tracing",
    "shutdown_tracing",
    "get_tracer",
    "TracingMiddleware",
    # Metrics
    "metrics_registry",
    "get_metrics",
    "MetricsMiddleware",
]
