"""Tests for menus, schedules, activity notes and events."""

from __future__ import annotations

import pytest

from kinderhub.errors import BadRequestError, ForbiddenError
from kinderhub.model import (
    ActivityNote,
    ActivityType,
    Event,
    EventPatch,
    Kid,
    MedicineRequest,
    Menu,
    Schedule,
    SchedulePatch,
    School,
    SchoolClass,
    get_millis,
)


def new_menu(week: int = 10, year: int = 2024, week_day: int = 1) -> Menu:
    return Menu(week=week, year=year, week_day=week_day, start_time=480, food_name="Pho")


def new_schedule(week: int = 10, year: int = 2024) -> Schedule:
    return Schedule(week=week, year=year, week_day=2, start_time=540, end_time=600, subject="Music")


def new_event(**kwargs) -> Event:
    return Event(title="Picnic", start_time=1000, end_time=2000, **kwargs)


class TestMenus:
    async def test_teacher_plans_week(self, app, world):
        monday = await app.activities.create_menu(world.teacher_session, world.school_class.id, new_menu())
        await app.activities.create_menu(world.teacher_session, world.school_class.id, new_menu(week=11))

        menus = await app.activities.get_menus(world.parent_session, world.school_class.id, 10, 2024)

        assert [m.id for m in menus] == [monday.id]
        assert monday.class_id == world.school_class.id

    async def test_parent_cannot_create(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.activities.create_menu(world.parent_session, world.school_class.id, new_menu())

    async def test_menus_are_per_class(self, app, admin, world):
        other = await app.schools.add_class(admin, world.school.id, SchoolClass(name="Bears"))
        await app.activities.create_menu(admin, other.id, new_menu())

        assert await app.activities.get_menus(admin, world.school_class.id, 10, 2024) == []


class TestSchedules:
    async def test_active_only(self, app, world):
        schedule = await app.activities.create_schedule(
            world.teacher_session, world.school_class.id, new_schedule()
        )
        await app.activities.patch_schedule(world.teacher_session, schedule.id, SchedulePatch(active=False))

        all_schedules = await app.activities.get_schedules(
            world.parent_session, world.school_class.id, 10, 2024
        )
        active = await app.activities.get_schedules(
            world.parent_session, world.school_class.id, 10, 2024, active_only=True
        )

        assert len(all_schedules) == 1
        assert active == []

    async def test_outsider_cannot_read(self, app, world):
        schedule = await app.activities.create_schedule(
            world.teacher_session, world.school_class.id, new_schedule()
        )
        with pytest.raises(ForbiddenError):
            await app.activities.get_schedule(world.outsider_session, schedule.id)


class TestActivityNotes:
    async def test_note_on_schedule(self, app, world):
        schedule = await app.activities.create_schedule(
            world.teacher_session, world.school_class.id, new_schedule()
        )

        note = await app.activities.create_activity_note(
            world.teacher_session,
            ActivityNote(activity_id=schedule.id, type=ActivityType.SCHEDULE, kid_id=world.kid.id, note="Sang"),
        )

        assert note.user_id == world.teacher.id
        notes = await app.activities.get_activity_notes(world.parent_session, world.kid.id)
        assert [n.id for n in notes] == [note.id]
        assert await app.activities.get_activity_notes(world.parent_session, world.kid.id, schedule.id)

    async def test_kid_of_other_class_rejected(self, app, admin, world):
        other = await app.schools.add_class(admin, world.school.id, SchoolClass(name="Bears"))
        menu = await app.activities.create_menu(admin, other.id, new_menu())

        with pytest.raises(BadRequestError) as exc:
            await app.activities.create_activity_note(
                admin, ActivityNote(activity_id=menu.id, type=ActivityType.MENU, kid_id=world.kid.id)
            )
        assert exc.value.code == "api.activity_note.class_mismatch.app_error"

    async def test_medicine_note_for_other_kid_rejected(self, app, admin, world):
        sibling = await app.kids.create_kid(
            admin, Kid(first_name="Binh", last_name="Nguyen", class_id=world.school_class.id)
        )
        request = await app.medicine.create_request(
            admin, MedicineRequest(kid_id=sibling.id, from_date=1, to_date=2)
        )

        with pytest.raises(BadRequestError) as exc:
            await app.activities.create_activity_note(
                admin,
                ActivityNote(activity_id=request.id, type=ActivityType.MEDICINE, kid_id=world.kid.id),
            )
        assert exc.value.code == "api.activity_note.kid_mismatch.app_error"

    async def test_parent_cannot_write_notes(self, app, world):
        menu = await app.activities.create_menu(world.teacher_session, world.school_class.id, new_menu())

        with pytest.raises(ForbiddenError):
            await app.activities.create_activity_note(
                world.parent_session,
                ActivityNote(activity_id=menu.id, type=ActivityType.MENU, kid_id=world.kid.id),
            )


class TestEvents:
    async def test_register_kid(self, app, world):
        event = await app.events.create_event(world.teacher_session, world.school_class.id, new_event())

        first = await app.events.register_kid(world.parent_session, event.id, world.kid.id)
        second = await app.events.register_kid(world.parent_session, event.id, world.kid.id)

        assert first.id == second.id
        assert first.register_by == world.parent.id
        assert len(await app.events.get_registrations(world.teacher_session, event.id)) == 1

    async def test_inactive_event(self, app, world):
        event = await app.events.create_event(world.teacher_session, world.school_class.id, new_event())
        await app.events.patch_event(world.teacher_session, event.id, EventPatch(active=False))

        with pytest.raises(BadRequestError) as exc:
            await app.events.register_kid(world.parent_session, event.id, world.kid.id)
        assert exc.value.code == "api.event.register.inactive.app_error"

    async def test_registration_closed(self, app, world):
        event = await app.events.create_event(
            world.teacher_session,
            world.school_class.id,
            new_event(register_expired=get_millis() - 1000),
        )

        with pytest.raises(BadRequestError) as exc:
            await app.events.register_kid(world.parent_session, event.id, world.kid.id)
        assert exc.value.code == "api.event.register.expired.app_error"

    async def test_other_class_needs_all_class_event(self, app, admin, world):
        bears = await app.schools.add_class(admin, world.school.id, SchoolClass(name="Bears"))
        closed = await app.events.create_event(admin, bears.id, new_event())
        open_ = await app.events.create_event(admin, bears.id, new_event(is_all_class=True))

        with pytest.raises(BadRequestError):
            await app.events.register_kid(world.parent_session, closed.id, world.kid.id)
        registration = await app.events.register_kid(world.parent_session, open_.id, world.kid.id)
        assert registration.event_id == open_.id

    async def test_all_class_event_of_other_school(self, app, admin, world):
        other = await app.schools.create_school(admin, School(name="daisy"))
        owls = await app.schools.add_class(admin, other.id, SchoolClass(name="Owls"))
        event = await app.events.create_event(admin, owls.id, new_event(is_all_class=True))

        with pytest.raises(BadRequestError):
            await app.events.register_kid(admin, event.id, world.kid.id)

    async def test_paid_needs_class_manager(self, app, world):
        event = await app.events.create_event(world.teacher_session, world.school_class.id, new_event())
        await app.events.register_kid(world.parent_session, event.id, world.kid.id)

        with pytest.raises(ForbiddenError):
            await app.events.set_registration_paid(world.parent_session, event.id, world.kid.id, True)

        registration = await app.events.set_registration_paid(
            world.teacher_session, event.id, world.kid.id, True
        )
        assert registration.paid

    async def test_outsider_cannot_list(self, app, world):
        with pytest.raises(ForbiddenError):
            await app.events.get_events(world.outsider_session, world.school_class.id)
