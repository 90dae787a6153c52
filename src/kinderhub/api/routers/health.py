"""Health check endpoints.

Provides Kubernetes-compatible liveness and readiness probes:
- /health/live  - Liveness probe (always returns OK if process is running)
- /health/ready - Readiness probe (checks database connectivity)
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from kinderhub.api.deps import AppDep

router = APIRouter(tags=["health"])

DATABASE_CHECK_TIMEOUT = 5.0


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of a single component."""

    name: str
    status: HealthStatus
    latency_ms: float
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "latency_ms": round(self.latency_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        return result


async def check_database(app: AppDep) -> ComponentHealth:
    start = time.monotonic()
    try:
        healthy = await asyncio.wait_for(app.system.health_check(), timeout=DATABASE_CHECK_TIMEOUT)
        message = None if healthy else "Database check failed"
    except TimeoutError:
        healthy = False
        message = "Database check timed out"
    latency = (time.monotonic() - start) * 1000
    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
        latency_ms=latency,
        message=message,
    )


@router.get("/health/live")
async def live() -> dict[str, str]:
    """Liveness probe; OK while the process is running."""
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(app: AppDep) -> ORJSONResponse:
    """Readiness probe; 503 when the database is unreachable."""
    database = await check_database(app)
    result = {"status": database.status.value, "components": [database.to_dict()]}
    status_code = 200 if database.status == HealthStatus.HEALTHY else 503
    return ORJSONResponse(content=result, status_code=status_code)
