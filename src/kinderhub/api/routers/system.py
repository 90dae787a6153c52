"""System endpoints.

- GET  /api/v4/system/ping          - Liveness of the API itself
- POST /api/v4/caches/invalidate    - Purge every memory cache cluster-wide
"""

from __future__ import annotations

from fastapi import APIRouter

from kinderhub.api.deps import AppDep, SessionDep
from kinderhub.config import settings

router = APIRouter(prefix="/api/v4", tags=["system"])


@router.get("/system/ping")
async def ping() -> dict[str, str]:
    return {"status": "OK", "instance_id": settings.instance_id}


@router.post("/caches/invalidate")
async def invalidate_caches(app: AppDep, session: SessionDep) -> dict[str, str]:
    await app.system.invalidate_all_caches(session)
    return {"status": "OK"}
