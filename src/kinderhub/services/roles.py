"""Roles and permission schemes."""

from __future__ import annotations

import logging

from kinderhub.errors import BadRequestError, NotFoundError
from kinderhub.model import Role, RolePatch, Scheme, SchemePatch, Session, new_id
from kinderhub.model.role import ROLE_DISPLAY_NAME_MAX_LENGTH
from kinderhub.persistence.store import Store
from kinderhub.security.rbac import Permission, RoleName, default_roles
from kinderhub.services.base import Service

logger = logging.getLogger(__name__)


async def seed_default_roles(store: Store) -> int:
    """Create the built-in roles that are missing; returns how many were created."""
    created = 0
    for role in default_roles():
        try:
            await store.role.get_by_name(role.name)
        except NotFoundError:
            await store.role.save(role)
            created += 1
    if created:
        logger.info(f"Seeded {created} built-in roles")
    return created


class RoleService(Service):
    async def get_role(self, session: Session, role_id: str) -> Role:
        return await self.store.role.get(role_id)

    async def get_role_by_name(self, session: Session, name: str) -> Role:
        return await self.store.role.get_by_name(name)

    async def get_roles_by_names(self, session: Session, names: list[str]) -> list[Role]:
        return await self.store.role.get_by_names(names)

    async def get_all_roles(self, session: Session) -> list[Role]:
        return await self.store.role.get_all()

    async def patch_role(self, session: Session, role_id: str, patch: RolePatch) -> Role:
        await self.permissions.require(session, Permission.MANAGE_ROLES, "patch_role")
        role = await self.store.role.get(role_id)
        role.apply_patch(patch)
        return await self.store.role.save(role)

    # -------------------------------------------------------------------------
    # Schemes
    # -------------------------------------------------------------------------

    async def _create_scheme_role(self, scheme: Scheme, template_name: str, label: str) -> Role:
        template = await self.store.role.get_by_name(template_name)
        role = Role(
            name=new_id(),
            display_name=f"{scheme.display_name} {label}"[:ROLE_DISPLAY_NAME_MAX_LENGTH],
            description=f"{label.title()} role of the {scheme.name} scheme",
            permissions=list(template.permissions),
            scheme_managed=True,
        )
        return await self.store.role.save(role)

    async def create_scheme(self, session: Session, scheme: Scheme) -> Scheme:
        """Create a scheme together with its admin, teacher and parent roles.

        The new roles start with the permissions of the built-in school roles.
        """
        await self.permissions.require(session, Permission.MANAGE_SYSTEM, "create_scheme")
        if scheme.id:
            raise BadRequestError(
                code="app.scheme.save.existing.app_error",
                text="Cannot create an existing scheme",
                where="RoleService.create_scheme",
                detail=f"id={scheme.id}",
            )

        admin = await self._create_scheme_role(scheme, RoleName.SCHOOL_ADMIN.value, "admin")
        teacher = await self._create_scheme_role(scheme, RoleName.SCHOOL_TEACHER.value, "teacher")
        parent = await self._create_scheme_role(scheme, RoleName.SCHOOL_PARENT.value, "parent")
        scheme.default_school_admin_role = admin.name
        scheme.default_school_teacher_role = teacher.name
        scheme.default_school_parent_role = parent.name
        created = await self.store.scheme.save(scheme)
        logger.info(f"Created scheme {created.id} ({created.name})")
        return created

    async def get_scheme(self, session: Session, scheme_id: str) -> Scheme:
        await self.permissions.require(session, Permission.MANAGE_SYSTEM, "get_scheme")
        return await self.store.scheme.get(scheme_id)

    async def get_schemes(self, session: Session, scope: str, page: int, per_page: int) -> list[Scheme]:
        await self.permissions.require(session, Permission.MANAGE_SYSTEM, "get_schemes")
        return await self.store.scheme.get_all_page(scope, page * per_page, per_page)

    async def patch_scheme(self, session: Session, scheme_id: str, patch: SchemePatch) -> Scheme:
        await self.permissions.require(session, Permission.MANAGE_SYSTEM, "patch_scheme")
        scheme = await self.store.scheme.get(scheme_id)
        scheme.apply_patch(patch)
        return await self.store.scheme.save(scheme)

    async def delete_scheme(self, session: Session, scheme_id: str) -> Scheme:
        """Soft delete a scheme and the roles it manages."""
        await self.permissions.require(session, Permission.MANAGE_SYSTEM, "delete_scheme")
        scheme = await self.store.scheme.get(scheme_id)
        for role_name in (
            scheme.default_school_admin_role,
            scheme.default_school_teacher_role,
            scheme.default_school_parent_role,
        ):
            try:
                role = await self.store.role.get_by_name(role_name)
            except NotFoundError:
                logger.warning(f"Scheme {scheme_id} refers to missing role {role_name}")
                continue
            await self.store.role.delete(role.id)
        return await self.store.scheme.delete(scheme_id)
