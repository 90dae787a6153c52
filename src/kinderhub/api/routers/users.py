"""User endpoints.

- POST /api/v4/users                   - Create user
- POST /api/v4/users/ids               - Profiles by ids
- GET  /api/v4/users/{user_id}         - Get user
- PUT  /api/v4/users/{user_id}         - Update user
- PUT  /api/v4/users/{user_id}/patch   - Patch user
"""

from __future__ import annotations

from fastapi import APIRouter

from kinderhub.api.deps import AppDep, SessionDep, require_matching_id
from kinderhub.model import User, UserPatch

router = APIRouter(prefix="/api/v4", tags=["users"])


@router.post("/users", status_code=201)
async def create_user(user: User, app: AppDep, session: SessionDep) -> User:
    return await app.users.create_user(session, user)


@router.post("/users/ids")
async def get_users_by_ids(user_ids: list[str], app: AppDep, session: SessionDep) -> list[User]:
    return await app.users.get_profiles_by_ids(session, user_ids)


@router.get("/users/{user_id}")
async def get_user(user_id: str, app: AppDep, session: SessionDep) -> User:
    return await app.users.get_user(session, user_id)


@router.put("/users/{user_id}")
async def update_user(user_id: str, user: User, app: AppDep, session: SessionDep) -> User:
    require_matching_id(user_id, user.id, "user id")
    return await app.users.update_user(session, user)


@router.put("/users/{user_id}/patch")
async def patch_user(user_id: str, patch: UserPatch, app: AppDep, session: SessionDep) -> User:
    return await app.users.patch_user(session, user_id, patch)
