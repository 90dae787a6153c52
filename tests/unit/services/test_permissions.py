"""Tests for system, school and kid permission checks."""

from __future__ import annotations

import pytest

from kinderhub.errors import ForbiddenError
from kinderhub.model import RolePatch, Scheme, SchoolMember, Session, User, get_millis, new_id
from kinderhub.security.rbac import Permission


class TestSystemPermissions:
    async def test_anonymous_admin_holds_everything(self, app, admin):
        for permission in Permission:
            assert await app.permissions.has_permission(admin, permission)

    async def test_user_record_roles(self, app):
        user = await app.store.user.save(
            User(username="boss", email="boss@example.com", roles="system_user system_admin")
        )

        assert await app.permissions.has_permission(Session(user_id=user.id), Permission.MANAGE_SYSTEM)

    async def test_session_roles(self, app, world):
        session = Session(user_id=world.outsider.id, roles=["system_admin"])

        assert await app.permissions.has_permission(session, Permission.MANAGE_ROLES)

    async def test_system_user_defaults(self, app, world):
        session = world.outsider_session

        assert await app.permissions.has_permission(session, Permission.CREATE_SCHOOL)
        assert not await app.permissions.has_permission(session, Permission.MANAGE_SYSTEM)

    async def test_unknown_session_user(self, app):
        session = Session(user_id=new_id())

        assert await app.permissions.system_permissions(session) == set()

    async def test_require_raises_forbidden(self, app, world):
        with pytest.raises(ForbiddenError) as exc:
            await app.permissions.require(world.outsider_session, Permission.MANAGE_SYSTEM, "test")
        assert exc.value.permission == "manage_system"
        assert exc.value.status_code == 403


class TestSchoolPermissions:
    async def test_teacher_flag(self, app, world):
        session = world.teacher_session
        school_id = world.school.id

        assert await app.permissions.has_school_permission(session, school_id, Permission.MANAGE_CLASS)
        assert not await app.permissions.has_school_permission(session, school_id, Permission.MANAGE_SCHOOL)

    async def test_parent_flag(self, app, world):
        session = world.parent_session
        school_id = world.school.id

        assert await app.permissions.has_school_permission(session, school_id, Permission.VIEW_SCHOOL)
        assert not await app.permissions.has_school_permission(session, school_id, Permission.MANAGE_CLASS)

    async def test_non_member(self, app, world):
        assert not await app.permissions.has_school_permission(
            world.outsider_session, world.school.id, Permission.VIEW_SCHOOL
        )

    async def test_removed_member_loses_access(self, app, world):
        member = await app.store.school.get_member(world.school.id, world.teacher.id)
        member.delete_at = get_millis()
        await app.store.school.update_member(member)

        assert not await app.permissions.has_school_permission(
            world.teacher_session, world.school.id, Permission.VIEW_SCHOOL
        )

    async def test_explicit_member_roles(self, app, world):
        await app.store.school.save_member(
            SchoolMember(school_id=world.school.id, user_id=world.outsider.id, roles="school_admin")
        )

        assert await app.permissions.has_school_permission(
            world.outsider_session, world.school.id, Permission.MANAGE_SCHOOL
        )

    async def test_require_class_returns_school(self, app, world):
        school_id = await app.permissions.require_class(
            world.teacher_session, world.school_class.id, Permission.MANAGE_CLASS
        )
        assert school_id == world.school.id

    async def test_missing_scheme_uses_default_roles(self, app, world):
        school = await app.store.school.get(world.school.id)
        school.scheme_id = new_id()
        await app.store.school.update(school)

        assert await app.permissions.has_school_permission(
            world.teacher_session, world.school.id, Permission.MANAGE_CLASS
        )


class TestSchemePermissions:
    """A school's scheme decides what the member flags grant."""

    @pytest.fixture
    async def scheme(self, app, admin, world):
        scheme = await app.roles.create_scheme(
            admin, Scheme(name="strict", display_name="Strict")
        )
        school = await app.store.school.get(world.school.id)
        school.scheme_id = scheme.id
        await app.store.school.update(school)
        return scheme

    async def test_scheme_roles_start_like_built_ins(self, app, world, scheme):
        assert await app.permissions.has_school_permission(
            world.teacher_session, world.school.id, Permission.MANAGE_CLASS
        )

    async def test_scheme_role_change_applies(self, app, admin, world, scheme):
        role = await app.store.role.get_by_name(scheme.default_school_teacher_role)
        await app.roles.patch_role(admin, role.id, RolePatch(permissions=["view_school"]))

        assert not await app.permissions.has_school_permission(
            world.teacher_session, world.school.id, Permission.MANAGE_CLASS
        )
        assert await app.permissions.has_school_permission(
            world.teacher_session, world.school.id, Permission.VIEW_SCHOOL
        )

    async def test_deleted_scheme_falls_back(self, app, admin, world, scheme):
        role = await app.store.role.get_by_name(scheme.default_school_teacher_role)
        await app.roles.patch_role(admin, role.id, RolePatch(permissions=[]))
        await app.roles.delete_scheme(admin, scheme.id)

        assert await app.permissions.has_school_permission(
            world.teacher_session, world.school.id, Permission.MANAGE_CLASS
        )


class TestKidPermissions:
    async def test_guardian(self, app, world):
        assert await app.permissions.has_kid_permission(
            world.parent_session, world.kid.id, Permission.MANAGE_KID
        )

    async def test_teacher_through_school(self, app, world):
        assert await app.permissions.has_kid_permission(
            world.teacher_session, world.kid.id, Permission.VIEW_KID
        )

    async def test_outsider(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.permissions.require_kid(world.outsider_session, world.kid.id, Permission.VIEW_KID)

    async def test_inactive_guardian_without_membership(self, app, admin, world):
        stranger = await app.store.user.save(User(username="stranger", email="stranger@example.com"))
        await app.kids.join_guardian(admin, world.kid.id, stranger.id)
        guardian = await app.store.kid.get_guardian(world.kid.id, stranger.id)
        guardian.delete_at = get_millis()
        await app.store.kid.update_guardian(guardian)

        assert not await app.permissions.has_kid_permission(
            Session(user_id=stranger.id), world.kid.id, Permission.VIEW_KID
        )
