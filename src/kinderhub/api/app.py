"""FastAPI application factory for kinderhub.

Creates the application with:
- REST routers under /api/v4 for schools, kids, activities, events, users,
  roles, emoji and reactions
- Health probes and the Prometheus /metrics endpoint
- Lifecycle management for the database, the local cache layer and the
  cluster messenger
- OIDC authentication (optional)
- OpenTelemetry tracing and Prometheus metrics
- ORJSON for fast JSON serialization
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.types import ExceptionHandler

from kinderhub.api.errors import (
    app_error_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from kinderhub.api.middleware import CorrelationMiddleware
from kinderhub.api.routers import (
    activities,
    emoji,
    events,
    health,
    kids,
    roles,
    schools,
    system,
    users,
)
from kinderhub.api.routers import metrics as metrics_router
from kinderhub.cache import Cluster, InMemoryCluster, LocalCacheLayer
from kinderhub.cache.redis_cluster import RedisCluster, close_redis
from kinderhub.config import settings
from kinderhub.errors import AppError
from kinderhub.observability import configure_logging
from kinderhub.observability.metrics import MetricsMiddleware, get_metrics
from kinderhub.observability.tracing import TracingMiddleware, setup_tracing, shutdown_tracing
from kinderhub.persistence.db import get_engine
from kinderhub.persistence.sqlstore import SqlStore
from kinderhub.services import App

logger = logging.getLogger(__name__)


def create_cluster() -> Cluster:
    """Redis pub/sub when clustering is enabled, a single local node otherwise."""
    if settings.cluster_enabled:
        return RedisCluster(instance_id=settings.instance_id, send_queue_size=settings.cluster_send_queue_size)
    return InMemoryCluster(instance_id=settings.instance_id, send_queue_size=settings.cluster_send_queue_size)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    On startup:
    - Configure structured logging
    - Initialize OpenTelemetry tracing and Prometheus metrics
    - Create tables and wrap the SQL store in the local cache layer
    - Start the cluster messenger and seed the built-in roles

    On shutdown:
    - Stop the cluster messenger
    - Close the database and Redis connections
    - Shutdown tracing
    """
    configure_logging(
        json_format=settings.env != "dev",
        level=settings.log_level,
    )

    setup_tracing()
    get_metrics()

    logger.info(f"Starting kinderhub ({settings.env}, instance {settings.instance_id})")

    store = LocalCacheLayer(SqlStore(get_engine()), cluster=create_cluster())
    await store.init()
    await store.cluster.start()

    kinderhub = App(store, cache_layer=store)
    await kinderhub.seed()
    app.state.kinderhub = kinderhub

    logger.info("kinderhub startup complete")

    yield

    logger.info("Shutting down kinderhub")
    await store.cluster.stop()
    await store.close()
    if settings.cluster_enabled:
        await close_redis()
    shutdown_tracing()
    logger.info("kinderhub shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="kinderhub",
        description="School and childcare management backend",
        version="0.1.0",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Order matters: TracingMiddleware wraps MetricsMiddleware wraps CorrelationMiddleware
    app.add_middleware(CorrelationMiddleware)
    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)
    if settings.enable_tracing:
        app.add_middleware(TracingMiddleware)

    app.add_exception_handler(AppError, cast(ExceptionHandler, app_error_handler))
    app.add_exception_handler(
        RequestValidationError, cast(ExceptionHandler, validation_exception_handler)
    )
    app.add_exception_handler(Exception, cast(ExceptionHandler, generic_exception_handler))

    app.include_router(health.router)
    if settings.enable_metrics:
        app.include_router(metrics_router.router)
    app.include_router(system.router)

    app.include_router(schools.router)
    app.include_router(kids.router)
    app.include_router(activities.router)
    app.include_router(events.router)
    app.include_router(users.router)
    app.include_router(roles.router)
    app.include_router(emoji.router)

    return app


app = create_app()
