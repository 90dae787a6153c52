"""Authorization checks.

A caller holds a permission in one of three scopes:

- system: granted by the roles of the session plus the roles stored on the
  user record
- school: granted by a system permission, or by the roles of an active
  membership in the school. A member's roles are the explicit ones plus the
  roles the school's scheme maps the admin, teacher and parent flags to
  (the built-in school roles when the school has no active scheme)
- kid: granted to the active guardians of the kid, or through a school
  permission on the school owning the kid's class

The school of a class, or of anything attached to a class, is always taken
from the entity's own parent chain.
"""

from __future__ import annotations

import logging

from kinderhub.errors import ForbiddenError, NotFoundError
from kinderhub.model import School, SchoolMember, Session
from kinderhub.persistence.store import Store
from kinderhub.security.rbac import Permission, RoleName, permissions_of

logger = logging.getLogger(__name__)


class PermissionService:
    def __init__(self, store: Store):
        self.store = store

    async def _permissions_for_role_names(self, names: set[str]) -> set[str]:
        if not names:
            return set()
        return permissions_of(await self.store.role.get_by_names(sorted(names)))

    async def system_permissions(self, session: Session) -> set[str]:
        names = set(session.roles)
        if not session.is_anonymous:
            try:
                user = await self.store.user.get(session.user_id)
                names.update(user.role_names)
            except NotFoundError:
                logger.debug(f"Session user {session.user_id} has no user record")
        return await self._permissions_for_role_names(names)

    async def has_permission(self, session: Session, permission: Permission) -> bool:
        return permission.value in await self.system_permissions(session)

    async def require(self, session: Session, permission: Permission, where: str = "") -> None:
        if not await self.has_permission(session, permission):
            raise ForbiddenError(permission.value, where=where or None)

    # -------------------------------------------------------------------------
    # School scope
    # -------------------------------------------------------------------------

    async def member_role_names(self, member: SchoolMember, school: School) -> set[str]:
        """Explicit roles of a member plus the roles of its scheme flags."""
        names = set(member.role_names)
        admin_role = RoleName.SCHOOL_ADMIN.value
        teacher_role = RoleName.SCHOOL_TEACHER.value
        parent_role = RoleName.SCHOOL_PARENT.value
        scheme = None
        if school.scheme_id:
            try:
                scheme = await self.store.scheme.get(school.scheme_id)
            except NotFoundError:
                logger.warning(f"School {school.id} refers to missing scheme {school.scheme_id}")
        # A deleted scheme falls back to the built-in school roles
        if scheme is not None and scheme.delete_at == 0:
            admin_role = scheme.default_school_admin_role
            teacher_role = scheme.default_school_teacher_role
            parent_role = scheme.default_school_parent_role

        if member.scheme_admin:
            names.add(admin_role)
        if member.scheme_teacher:
            names.add(teacher_role)
        if member.scheme_parent:
            names.add(parent_role)
        return names

    async def has_school_permission(
        self, session: Session, school_id: str, permission: Permission
    ) -> bool:
        if await self.has_permission(session, permission):
            return True

        try:
            member = await self.store.school.get_member(school_id, session.user_id)
            school = await self.store.school.get(school_id)
        except NotFoundError:
            return False
        if member.delete_at != 0:
            return False

        names = await self.member_role_names(member, school)
        return permission.value in await self._permissions_for_role_names(names)

    async def require_school(
        self, session: Session, school_id: str, permission: Permission, where: str = ""
    ) -> None:
        if not await self.has_school_permission(session, school_id, permission):
            raise ForbiddenError(permission.value, where=where or None)

    async def require_class(
        self, session: Session, class_id: str, permission: Permission, where: str = ""
    ) -> str:
        """Check ``permission`` on the school owning a class; returns the school id."""
        school_class = await self.store.school.get_class(class_id)
        await self.require_school(session, school_class.school_id, permission, where)
        return school_class.school_id

    # -------------------------------------------------------------------------
    # Kid scope
    # -------------------------------------------------------------------------

    async def has_kid_permission(self, session: Session, kid_id: str, permission: Permission) -> bool:
        if await self.has_permission(session, permission):
            return True

        try:
            guardian = await self.store.kid.get_guardian(kid_id, session.user_id)
        except NotFoundError:
            guardian = None
        if guardian is not None and guardian.is_active:
            granted = await self._permissions_for_role_names({RoleName.KID_GUARDIAN.value})
            if permission.value in granted:
                return True

        kid = await self.store.kid.get(kid_id)
        try:
            school_class = await self.store.school.get_class(kid.class_id)
        except NotFoundError:
            return False
        return await self.has_school_permission(session, school_class.school_id, permission)

    async def require_kid(
        self, session: Session, kid_id: str, permission: Permission, where: str = ""
    ) -> None:
        if not await self.has_kid_permission(session, kid_id, permission):
            raise ForbiddenError(permission.value, where=where or None)
