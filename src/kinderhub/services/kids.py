"""Kid and guardian operations."""

from __future__ import annotations

import logging

from kinderhub.errors import BadRequestError, NotFoundError
from kinderhub.model import Kid, KidGuardian, KidPatch, Session
from kinderhub.model.kid import KID_UPDATABLE_FIELDS, MAX_ACTIVE_GUARDIANS
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service

logger = logging.getLogger(__name__)


class KidService(Service):
    async def create_kid(self, session: Session, kid: Kid) -> Kid:
        """Create a kid in an existing class."""
        school_class = await self.store.school.get_class(kid.class_id)
        await self.permissions.require_school(
            session, school_class.school_id, Permission.CREATE_KID, "create_kid"
        )
        kid.invite_id = ""
        return await self.store.kid.save(kid)

    async def get_kid(self, session: Session, kid_id: str) -> Kid:
        await self.permissions.require_kid(session, kid_id, Permission.VIEW_KID, "get_kid")
        return await self.store.kid.get(kid_id)

    async def _update(self, session: Session, stored: Kid, previous_class_id: str) -> Kid:
        if stored.class_id != previous_class_id:
            # Moving a kid needs the same rights in the destination class.
            await self.permissions.require_class(
                session, stored.class_id, Permission.MANAGE_KID, "update_kid"
            )
        return await self.store.kid.update(stored)

    async def update_kid(self, session: Session, kid: Kid) -> Kid:
        await self.permissions.require_kid(session, kid.id, Permission.MANAGE_KID, "update_kid")
        stored = await self.store.kid.get(kid.id)
        previous_class_id = stored.class_id
        stored.copy_fields(kid, KID_UPDATABLE_FIELDS)
        return await self._update(session, stored, previous_class_id)

    async def patch_kid(self, session: Session, kid_id: str, patch: KidPatch) -> Kid:
        await self.permissions.require_kid(session, kid_id, Permission.MANAGE_KID, "patch_kid")
        stored = await self.store.kid.get(kid_id)
        previous_class_id = stored.class_id
        stored.apply_patch(patch)
        return await self._update(session, stored, previous_class_id)

    async def get_kids_for_user(self, session: Session, user_id: str) -> list[Kid]:
        await self.require_self_or(session, user_id, Permission.EDIT_OTHER_USERS, "get_kids_for_user")
        return await self.store.kid.get_kids_for_user(user_id)

    async def get_kids_by_class(self, session: Session, class_id: str) -> list[Kid]:
        await self.permissions.require_class(session, class_id, Permission.VIEW_KID, "get_kids_by_class")
        return await self.store.kid.get_kids_by_class(class_id)

    # -------------------------------------------------------------------------
    # Guardians
    # -------------------------------------------------------------------------

    async def join_guardian(
        self, session: Session, kid_id: str, user_id: str, is_parent: bool = True
    ) -> KidGuardian:
        """Make ``user_id`` a guardian of the kid.

        Joining an already active guardian is a no-op. A kid has at most
        ``MAX_ACTIVE_GUARDIANS`` active guardians, counting a guardian
        that is being reactivated.
        """
        await self.permissions.require_kid(session, kid_id, Permission.MANAGE_KID, "join_guardian")
        await self.store.kid.get(kid_id)
        await self.store.user.get(user_id)

        try:
            existing = await self.store.kid.get_guardian(kid_id, user_id)
        except NotFoundError:
            existing = None
        if existing is not None and existing.is_active:
            return existing

        if await self.store.kid.get_active_guardian_count(kid_id) >= MAX_ACTIVE_GUARDIANS:
            raise BadRequestError(
                code="app.kid.join_user_to_kid.max_accounts.app_error",
                text="This kid has reached the maximum number of guardians",
                where="join_guardian",
                detail=f"kid_id={kid_id}",
            )

        if existing is not None:
            existing.delete_at = 0
            existing.is_parent = is_parent
            guardian = await self.store.kid.update_guardian(existing)
        else:
            guardian = await self.store.kid.save_guardian(
                KidGuardian(kid_id=kid_id, user_id=user_id, is_parent=is_parent)
            )

        await self.store.user.update_update_at(user_id)
        self.store.user.invalidate_profile_cache_for_user(user_id)
        logger.info(f"User {user_id} joined kid {kid_id} as guardian")
        return guardian

    async def get_guardians(self, session: Session, kid_id: str) -> list[KidGuardian]:
        await self.permissions.require_kid(session, kid_id, Permission.VIEW_KID, "get_guardians")
        return await self.store.kid.get_guardians(kid_id)
