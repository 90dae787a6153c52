"""Tests for roles, schemes, emoji, reactions, users and system operations."""

from __future__ import annotations

import pytest

from kinderhub.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from kinderhub.model import (
    ActivityNote,
    ActivityType,
    Emoji,
    Event,
    Menu,
    Reaction,
    RolePatch,
    Scheme,
    SchemePatch,
    User,
    UserPatch,
    new_id,
)
from kinderhub.security.rbac import RoleName, default_roles


class TestRoles:
    async def test_seed_is_idempotent(self, app, admin):
        assert await app.seed() == 0
        names = {r.name for r in await app.roles.get_all_roles(admin)}
        assert names == {r.name for r in default_roles()}

    async def test_reads_need_no_permission(self, app, world):
        role = await app.roles.get_role_by_name(world.outsider_session, "school_teacher")
        same = await app.roles.get_role(world.outsider_session, role.id)
        roles = await app.roles.get_roles_by_names(world.outsider_session, ["school_teacher", "nope"])

        assert same.name == role.name
        assert [r.name for r in roles] == ["school_teacher"]

    async def test_patch_role_needs_manage_roles(self, app, world):
        role = await app.store.role.get_by_name("school_parent")
        with pytest.raises(ForbiddenError):
            await app.roles.patch_role(world.outsider_session, role.id, RolePatch(permissions=[]))

    async def test_patch_role(self, app, admin):
        role = await app.store.role.get_by_name("school_parent")

        patched = await app.roles.patch_role(admin, role.id, RolePatch(permissions=["view_school"]))

        assert patched.permissions == ["view_school"]
        assert (await app.roles.get_role_by_name(admin, "school_parent")).permissions == ["view_school"]


class TestSchemes:
    async def test_create_scheme_creates_roles(self, app, admin):
        scheme = await app.roles.create_scheme(admin, Scheme(name="strict", display_name="Strict"))

        admin_role = await app.store.role.get_by_name(scheme.default_school_admin_role)
        builtin = await app.store.role.get_by_name(RoleName.SCHOOL_ADMIN.value)
        assert admin_role.scheme_managed
        assert not admin_role.built_in
        assert admin_role.permissions == builtin.permissions
        assert len(
            {
                scheme.default_school_admin_role,
                scheme.default_school_teacher_role,
                scheme.default_school_parent_role,
            }
        ) == 3

    async def test_create_existing_rejected(self, app, admin):
        with pytest.raises(BadRequestError):
            await app.roles.create_scheme(admin, Scheme(id=new_id(), name="strict", display_name="Strict"))

    async def test_schemes_need_manage_system(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.roles.create_scheme(world.outsider_session, Scheme(name="strict", display_name="S"))
        with pytest.raises(ForbiddenError):
            await app.roles.get_schemes(world.outsider_session, "school", 0, 10)

    async def test_list_and_patch(self, app, admin):
        first = await app.roles.create_scheme(admin, Scheme(name="alpha", display_name="Alpha"))
        await app.roles.create_scheme(admin, Scheme(name="beta", display_name="Beta"))

        page = await app.roles.get_schemes(admin, "school", 0, 1)
        patched = await app.roles.patch_scheme(admin, first.id, SchemePatch(description="First"))

        assert len(page) == 1
        assert patched.description == "First"
        assert (await app.roles.get_scheme(admin, first.id)).description == "First"

    async def test_delete_scheme_deletes_roles(self, app, admin):
        scheme = await app.roles.create_scheme(admin, Scheme(name="strict", display_name="Strict"))

        deleted = await app.roles.delete_scheme(admin, scheme.id)

        assert deleted.delete_at > 0
        role = await app.store.role.get_by_name(scheme.default_school_parent_role)
        assert role.delete_at > 0


class TestEmoji:
    async def test_create(self, app, world):
        emoji = await app.emoji.create_emoji(world.outsider_session, Emoji(name="party"))

        assert emoji.creator_id == world.outsider.id
        assert (await app.emoji.get_emoji_by_name(world.teacher_session, "party")).id == emoji.id

    async def test_system_name_rejected(self, app, world):
        with pytest.raises(BadRequestError):
            await app.emoji.create_emoji(world.outsider_session, Emoji(name="heart"))

    async def test_duplicate_name_conflicts(self, app, world):
        await app.emoji.create_emoji(world.outsider_session, Emoji(name="party"))
        with pytest.raises(ConflictError):
            await app.emoji.create_emoji(world.teacher_session, Emoji(name="party"))

    async def test_delete_others_emoji_forbidden(self, app, world):
        emoji = await app.emoji.create_emoji(world.outsider_session, Emoji(name="party"))

        with pytest.raises(ForbiddenError):
            await app.emoji.delete_emoji(world.teacher_session, emoji.id)

    async def test_list_and_search(self, app, admin):
        for name in ("party", "parrot", "zzz"):
            await app.emoji.create_emoji(admin, Emoji(name=name))

        listed = await app.emoji.get_emoji_list(admin, 0, 2, "name")
        found = await app.emoji.search_emoji(admin, "par", True, 10)

        assert [e.name for e in listed] == ["parrot", "party"]
        assert [e.name for e in found] == ["parrot", "party"]


class TestReactions:
    @pytest.fixture
    async def event(self, app, world):
        return await app.events.create_event(
            world.teacher_session,
            world.school_class.id,
            Event(title="Picnic", start_time=1000, end_time=2000),
        )

    async def test_react_on_event(self, app, world, event):
        reaction = Reaction(user_id=world.parent.id, target_id=event.id, emoji_name="heart")

        await app.emoji.save_reaction(world.parent_session, reaction)

        reactions = await app.emoji.get_reactions(world.teacher_session, event.id)
        assert [(r.user_id, r.emoji_name) for r in reactions] == [(world.parent.id, "heart")]

    async def test_react_on_activity_note(self, app, admin, world):
        menu = await app.store.menu.save(
            Menu(class_id=world.school_class.id, week_day=1, start_time=1, food_name="Rice")
        )
        note = await app.activities.create_activity_note(
            admin, ActivityNote(activity_id=menu.id, type=ActivityType.MENU, kid_id=world.kid.id)
        )

        await app.emoji.save_reaction(
            world.parent_session, Reaction(user_id=world.parent.id, target_id=note.id, emoji_name="star")
        )

        assert len(await app.emoji.get_reactions(admin, note.id)) == 1

    async def test_unknown_target(self, app, world):
        with pytest.raises(NotFoundError):
            await app.emoji.save_reaction(
                world.parent_session,
                Reaction(user_id=world.parent.id, target_id=new_id(), emoji_name="heart"),
            )

    async def test_unknown_emoji(self, app, world, event):
        with pytest.raises(BadRequestError):
            await app.emoji.save_reaction(
                world.parent_session,
                Reaction(user_id=world.parent.id, target_id=event.id, emoji_name="nothing"),
            )

    async def test_react_for_someone_else(self, app, world, event):
        with pytest.raises(ForbiddenError):
            await app.emoji.save_reaction(
                world.parent_session,
                Reaction(user_id=world.teacher.id, target_id=event.id, emoji_name="heart"),
            )

    async def test_deleting_emoji_removes_reactions(self, app, world, event):
        emoji = await app.emoji.create_emoji(world.parent_session, Emoji(name="party"))
        await app.emoji.save_reaction(
            world.parent_session, Reaction(user_id=world.parent.id, target_id=event.id, emoji_name="party")
        )
        assert len(await app.emoji.get_reactions(world.parent_session, event.id)) == 1

        await app.emoji.delete_emoji(world.parent_session, emoji.id)

        assert await app.emoji.get_reactions(world.parent_session, event.id) == []
        with pytest.raises(NotFoundError):
            await app.emoji.get_emoji(world.parent_session, emoji.id)

    async def test_delete_reaction(self, app, world, event):
        reaction = Reaction(user_id=world.parent.id, target_id=event.id, emoji_name="heart")
        await app.emoji.save_reaction(world.parent_session, reaction)

        await app.emoji.delete_reaction(world.parent_session, reaction)

        assert await app.emoji.get_reactions(world.parent_session, event.id) == []


class TestUsers:
    async def test_create_needs_edit_other_users(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.users.create_user(world.outsider_session, User(username="mai", email="mai@example.com"))

    async def test_role_manager_assigns_roles(self, app, admin):
        user = await app.users.create_user(
            admin, User(username="boss", email="boss@example.com", roles="system_admin")
        )
        assert user.roles == "system_admin"

    async def test_patch_self(self, app, world):
        user = await app.users.patch_user(world.parent_session, world.parent.id, UserPatch(nickname="Mom"))

        assert user.nickname == "Mom"
        assert user.username == "parent"

    async def test_patch_other_forbidden(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.users.patch_user(world.parent_session, world.teacher.id, UserPatch(nickname="x"))

    async def test_update_invalidates_profile(self, app, world):
        await app.users.get_profiles_by_ids(world.parent_session, [world.parent.id])
        submitted = world.parent.model_copy()
        submitted.first_name = "Lan"

        await app.users.update_user(world.parent_session, submitted)

        profiles = await app.users.get_profiles_by_ids(world.parent_session, [world.parent.id])
        assert profiles[0].first_name == "Lan"


class TestSystem:
    async def test_invalidate_all_caches(self, app, admin):
        await app.roles.get_role_by_name(admin, "school_admin")
        assert len(app.cache_layer.role_cache) > 0

        await app.system.invalidate_all_caches(admin)

        assert all(len(cache) == 0 for cache in app.cache_layer.caches)

    async def test_invalidate_needs_manage_system(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.system.invalidate_all_caches(world.outsider_session)

    async def test_health_check(self, app):
        assert await app.system.health_check() is True
