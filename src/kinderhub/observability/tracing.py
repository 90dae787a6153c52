"""OpenTelemetry tracing for kinderhub.

Provides distributed tracing with OTLP export:
- Automatic request/response tracing
- Custom span creation

Usage:
    from kinderhub.observability.tracing import get_tracer

    tracer = get_tracer(__name__)

    with tracer.start_as_current_span("join_guardian") as span:
        span.set_attribute("kid.id", kid_id)
        ...
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.trace import StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from kinderhub.config import settings

if TYPE_CHECKING:
    from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# Global tracer provider
_tracer_provider: TracerProvider | None = None
_initialized = False


def setup_tracing() -> None:
    """Initialize OpenTelemetry tracing.

    Configures:
    - OTLP exporter (if endpoint configured)
    - Console exporter (for development)
    """
    global _tracer_provider, _initialized

    if _initialized:
        return

    if not settings.enable_tracing:
        logger.info("Tracing is disabled")
        _initialized = True
        return

    resource = Resource.create(
        {
            "service.name": settings.app_name,
            "service.instance.id": settings.instance_id,
            "deployment.environment": settings.env,
        }
    )
    _tracer_provider = TracerProvider(resource=resource)

    if settings.otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=settings.otlp_endpoint)
        _tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        logger.info(f"OTLP tracing enabled: {settings.otlp_endpoint}")
    elif settings.env == "dev":
        _tracer_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console tracing enabled (dev mode)")

    trace.set_tracer_provider(_tracer_provider)
    _initialized = True
    logger.info("OpenTelemetry tracing initialized")


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer for creating spans.

    Without a configured provider the OpenTelemetry API hands out a no-op
    tracer, so callers never need to check whether tracing is enabled.
    """
    return trace.get_tracer(name)


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware for HTTP request tracing.

    Creates a span for each request with:
    - HTTP method and path
    - Status code
    - Error information
    """

    def __init__(self, app: "ASGIApp") -> None:
        super().__init__(app)
        self.tracer = get_tracer("kinderhub.api")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        if request.url.path in ("/health/live", "/health/ready", "/metrics"):
            return await call_next(request)

        span_name = f"{request.method} {request.url.path}"

        with self.tracer.start_as_current_span(span_name) as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("http.url", str(request.url))
            span.set_attribute("http.route", request.url.path)
            span.set_attribute("http.scheme", request.url.scheme)

            if request.client:
                span.set_attribute("http.client_ip", request.client.host)

            session = getattr(request.state, "session", None)
            if session is not None:
                span.set_attribute("user.id", session.user_id)

            try:
                response = await call_next(request)
                span.set_attribute("http.status_code", response.status_code)

                if response.status_code >= 500:
                    span.set_status(StatusCode.ERROR)
                elif response.status_code >= 400:
                    span.set_attribute("http.error", True)

                return response

            except Exception as e:
                span.record_exception(e)
                span.set_status(StatusCode.ERROR, str(e))
                raise


def shutdown_tracing() -> None:
    """Shutdown tracing and flush remaining spans."""
    global _tracer_provider, _initialized

    if _tracer_provider is not None:
        try:
            _tracer_provider.shutdown()
            logger.info("OpenTelemetry tracing shutdown complete")
        except Exception as e:
            logger.warning(f"Error shutting down tracing: {e}")

    _tracer_provider = None
    _initialized = False
