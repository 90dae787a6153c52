"""Role and scheme endpoints.

- GET    /api/v4/roles                       - All roles
- POST   /api/v4/roles/names                 - Roles by names
- GET    /api/v4/roles/name/{role_name}      - Role by name
- GET    /api/v4/roles/{role_id}             - Get role
- PUT    /api/v4/roles/{role_id}/patch       - Patch role permissions
- POST   /api/v4/schemes                     - Create scheme
- GET    /api/v4/schemes                     - List schemes
- GET    /api/v4/schemes/{scheme_id}         - Get scheme
- PUT    /api/v4/schemes/{scheme_id}/patch   - Patch scheme
- DELETE /api/v4/schemes/{scheme_id}         - Delete scheme
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from kinderhub.api.deps import AppDep, SessionDep
from kinderhub.model import Role, RolePatch, Scheme, SchemePatch

router = APIRouter(prefix="/api/v4", tags=["roles"])

DEFAULT_PER_PAGE = 60
MAX_PER_PAGE = 200


@router.get("/roles")
async def get_all_roles(app: AppDep, session: SessionDep) -> list[Role]:
    return await app.roles.get_all_roles(session)


@router.post("/roles/names")
async def get_roles_by_names(names: list[str], app: AppDep, session: SessionDep) -> list[Role]:
    return await app.roles.get_roles_by_names(session, names)


@router.get("/roles/name/{role_name}")
async def get_role_by_name(role_name: str, app: AppDep, session: SessionDep) -> Role:
    return await app.roles.get_role_by_name(session, role_name)


@router.get("/roles/{role_id}")
async def get_role(role_id: str, app: AppDep, session: SessionDep) -> Role:
    return await app.roles.get_role(session, role_id)


@router.put("/roles/{role_id}/patch")
async def patch_role(role_id: str, patch: RolePatch, app: AppDep, session: SessionDep) -> Role:
    return await app.roles.patch_role(session, role_id, patch)


@router.post("/schemes", status_code=201)
async def create_scheme(scheme: Scheme, app: AppDep, session: SessionDep) -> Scheme:
    return await app.roles.create_scheme(session, scheme)


@router.get("/schemes")
async def get_schemes(
    app: AppDep,
    session: SessionDep,
    scope: str = "",
    page: int = Query(default=0, ge=0),
    per_page: int = Query(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
) -> list[Scheme]:
    return await app.roles.get_schemes(session, scope, page, per_page)


@router.get("/schemes/{scheme_id}")
async def get_scheme(scheme_id: str, app: AppDep, session: SessionDep) -> Scheme:
    return await app.roles.get_scheme(session, scheme_id)


@router.put("/schemes/{scheme_id}/patch")
async def patch_scheme(
    scheme_id: str, patch: SchemePatch, app: AppDep, session: SessionDep
) -> Scheme:
    return await app.roles.patch_scheme(session, scheme_id, patch)


@router.delete("/schemes/{scheme_id}")
async def delete_scheme(scheme_id: str, app: AppDep, session: SessionDep) -> Scheme:
    return await app.roles.delete_scheme(session, scheme_id)
