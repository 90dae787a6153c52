"""User accounts and profiles."""

from __future__ import annotations

from kinderhub.model import Session, User, UserPatch
from kinderhub.model.user import USER_UPDATABLE_FIELDS
from kinderhub.security.rbac import Permission, RoleName
from kinderhub.services.base import Service


class UserService(Service):
    async def create_user(self, session: Session, user: User) -> User:
        """Create an account; only role managers may hand out other roles."""
        await self.permissions.require(session, Permission.EDIT_OTHER_USERS, "create_user")
        if not await self.permissions.has_permission(session, Permission.MANAGE_ROLES):
            user.roles = RoleName.SYSTEM_USER.value
        return await self.store.user.save(user)

    async def get_user(self, session: Session, user_id: str) -> User:
        return await self.store.user.get(user_id)

    async def update_user(self, session: Session, user: User) -> User:
        await self.require_self_or(session, user.id, Permission.EDIT_OTHER_USERS, "update_user")
        stored = await self.store.user.get(user.id)
        stored.copy_fields(user, USER_UPDATABLE_FIELDS)
        return await self.store.user.update(stored)

    async def patch_user(self, session: Session, user_id: str, patch: UserPatch) -> User:
        await self.require_self_or(session, user_id, Permission.EDIT_OTHER_USERS, "patch_user")
        stored = await self.store.user.get(user_id)
        stored.apply_patch(patch)
        return await self.store.user.update(stored)

    async def get_profiles_by_ids(self, session: Session, user_ids: list[str]) -> list[User]:
        return await self.store.user.get_profile_by_ids(user_ids, True)
