"""Tests for the domain model lifecycle and validation."""

from __future__ import annotations

import pytest

from kinderhub.errors import BadRequestError
from kinderhub.model import (
    Event,
    Health,
    Kid,
    KidPatch,
    Menu,
    Role,
    Schedule,
    School,
    SchoolClass,
    SchoolPatch,
    User,
    new_id,
)
from kinderhub.model.base import is_valid_id
from kinderhub.model.emoji import is_valid_emoji_name
from kinderhub.model.health import Vaccine, get_vaccine_book_entry
from kinderhub.model.school import is_reserved_school_name


def saved(entity):
    entity.pre_save()
    return entity


class TestIds:
    def test_new_id_shape(self):
        ids = {new_id() for _ in range(100)}
        assert len(ids) == 100
        assert all(is_valid_id(i) for i in ids)
        assert all(i == i.lower() for i in ids)

    def test_invalid_ids(self):
        assert not is_valid_id("")
        assert not is_valid_id("short")
        assert not is_valid_id("x" * 25 + "-")


class TestLifecycle:
    def test_pre_save_sets_timestamps(self):
        school = saved(School(name="sunflower"))
        assert is_valid_id(school.id)
        assert school.create_at == school.update_at > 0
        assert school.invite_id

    def test_pre_save_keeps_existing_id(self):
        fixed = new_id()
        school = saved(School(id=fixed, name="sunflower"))
        assert school.id == fixed

    def test_pre_update_bumps_update_at(self):
        school = saved(School(name="sunflower"))
        school.update_at = 1
        school.pre_update()
        assert school.update_at > 1

    def test_apply_patch_only_set_fields(self):
        school = School(name="sunflower", description="Old", phone="123")
        school.apply_patch(SchoolPatch(description="New"))
        assert school.description == "New"
        assert school.phone == "123"

    def test_copy_fields(self):
        kid = Kid(first_name="An", last_name="Nguyen", invite_id="keep")
        kid.copy_fields(Kid(first_name="Binh", last_name="Tran", invite_id="drop"), ("first_name",))
        assert kid.first_name == "Binh"
        assert kid.last_name == "Nguyen"
        assert kid.invite_id == "keep"

    def test_patch_ignores_unknown_fields(self):
        patch = KidPatch.model_validate({"first_name": "An", "invite_id": "x"})
        assert patch.model_dump(exclude_none=True) == {"first_name": "An"}

    def test_sanitize(self):
        school = School(name="sunflower", email="office@example.com")
        school.sanitize()
        assert school.email == ""

        school_class = SchoolClass(name="Rabbits", invite_id="secret")
        school_class.sanitize()
        assert school_class.invite_id == ""


class TestValidation:
    def test_school_errors_name_the_field(self):
        school = saved(School(name="sunflower", phone="0123456789012"))
        with pytest.raises(BadRequestError) as exc:
            school.is_valid()
        assert exc.value.code == "model.school.is_valid.phone.app_error"
        assert exc.value.status_code == 400

    def test_reserved_school_names(self):
        assert is_reserved_school_name("Admins")
        assert is_reserved_school_name("signup-school")
        assert not is_reserved_school_name("sunflower")

    def test_school_name_characters(self):
        with pytest.raises(BadRequestError):
            saved(School(name="Sun Flower")).is_valid()
        saved(School(name="sun-flower")).is_valid()

    def test_kid_requires_class(self):
        with pytest.raises(BadRequestError) as exc:
            saved(Kid(first_name="An", last_name="Nguyen")).is_valid()
        assert exc.value.code == "model.kid.is_valid.class_id.app_error"

    def test_schedule_end_before_start(self):
        schedule = saved(
            Schedule(class_id=new_id(), subject="Music", week_day=2, start_time=10, end_time=5)
        )
        with pytest.raises(BadRequestError):
            schedule.is_valid()

    def test_schedule_saved_active(self):
        schedule = saved(Schedule(active=False))
        assert schedule.active is True

    def test_menu_week_day_range(self):
        menu = saved(Menu(class_id=new_id(), food_name="Rice", week_day=8, start_time=10))
        with pytest.raises(BadRequestError) as exc:
            menu.is_valid()
        assert exc.value.code == "model.menu.is_valid.week_day.app_error"

    def test_event_valid(self):
        event = saved(Event(class_id=new_id(), title="Picnic", start_time=10, end_time=20))
        event.is_valid()

    def test_health_requires_measurements(self):
        with pytest.raises(BadRequestError):
            saved(Health(kid_id=new_id(), height=100, measure_at=1)).is_valid()

    def test_vaccine_book_reference(self):
        assert get_vaccine_book_entry(1).title == "Tuberculosis"
        assert get_vaccine_book_entry(99) is None
        vaccine = saved(
            Vaccine(kid_id=new_id(), vaccine_book_id=99, vaccine_name="X", time=1, date=1)
        )
        with pytest.raises(BadRequestError):
            vaccine.is_valid()

    def test_role_name_pattern(self):
        with pytest.raises(BadRequestError):
            saved(Role(name="School Admin", display_name="School Admin")).is_valid()
        saved(Role(name="school_admin", display_name="School Admin")).is_valid()

    def test_user_lowercased_before_validation(self):
        user = saved(User(username="Mai", email="Mai@Example.com"))
        user.is_valid()
        assert user.username == "mai"
        assert user.role_names == ["system_user"]

    def test_emoji_names(self):
        assert is_valid_emoji_name("smile_2")
        assert is_valid_emoji_name("+1")
        assert not is_valid_emoji_name("smi le")
        assert not is_valid_emoji_name("")
