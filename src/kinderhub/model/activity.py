"""Class activities: weekly menus, schedules and the notes teachers leave on them."""

from __future__ import annotations

from enum import Enum

from kinderhub.model.base import EntityModel, PatchModel, invalid, is_valid_id

MENU_FOOD_NAME_MAX_LENGTH = 24
MENU_DESCRIPTION_MAX_LENGTH = 128

SCHEDULE_SUBJECT_MAX_LENGTH = 24
SCHEDULE_DESCRIPTION_MAX_LENGTH = 128

NOTE_MAX_LENGTH = 128

MENU_UPDATABLE_FIELDS = ("week", "year", "food_name", "description", "week_day", "start_time", "note")
SCHEDULE_UPDATABLE_FIELDS = (
    "week",
    "year",
    "subject",
    "description",
    "week_day",
    "start_time",
    "end_time",
    "active",
)


def _is_valid_week_day(week_day: int) -> bool:
    return 1 <= week_day <= 7


class Menu(EntityModel):
    delete_at: int = 0
    class_id: str = ""
    week: int = 0
    year: int = 0
    food_name: str = ""
    description: str = ""
    week_day: int = 0
    start_time: int = 0
    note: str = ""

    def is_valid(self) -> None:
        self._check_base("menu")
        if not is_valid_id(self.class_id):
            raise invalid("menu", "class_id", self.id)
        if self.start_time == 0:
            raise invalid("menu", "start_time", self.id)
        if not _is_valid_week_day(self.week_day):
            raise invalid("menu", "week_day", self.id)
        if not 0 < len(self.food_name) <= MENU_FOOD_NAME_MAX_LENGTH:
            raise invalid("menu", "food_name", self.id)
        if len(self.description) > MENU_DESCRIPTION_MAX_LENGTH:
            raise invalid("menu", "description", self.id)


class MenuPatch(PatchModel):
    week: int | None = None
    year: int | None = None
    food_name: str | None = None
    description: str | None = None
    week_day: int | None = None
    start_time: int | None = None
    note: str | None = None


class Schedule(EntityModel):
    delete_at: int = 0
    class_id: str = ""
    week: int = 0
    year: int = 0
    subject: str = ""
    description: str = ""
    week_day: int = 0
    start_time: int = 0
    end_time: int = 0
    active: bool = True

    def pre_save(self) -> None:
        super().pre_save()
        self.active = True

    def is_valid(self) -> None:
        self._check_base("schedule")
        if not is_valid_id(self.class_id):
            raise invalid("schedule", "class_id", self.id)
        if self.start_time == 0:
            raise invalid("schedule", "start_time", self.id)
        if self.end_time == 0 or self.end_time < self.start_time:
            raise invalid("schedule", "end_time", self.id)
        if not _is_valid_week_day(self.week_day):
            raise invalid("schedule", "week_day", self.id)
        if not 0 < len(self.subject) <= SCHEDULE_SUBJECT_MAX_LENGTH:
            raise invalid("schedule", "subject", self.id)
        if len(self.description) > SCHEDULE_DESCRIPTION_MAX_LENGTH:
            raise invalid("schedule", "description", self.id)


class SchedulePatch(PatchModel):
    week: int | None = None
    year: int | None = None
    subject: str | None = None
    description: str | None = None
    week_day: int | None = None
    start_time: int | None = None
    end_time: int | None = None
    active: bool | None = None


class ActivityType(str, Enum):
    """Kind of activity a note is attached to."""

    SCHEDULE = "S"
    MENU = "F"
    MEDICINE = "M"


class ActivityNote(EntityModel):
    delete_at: int = 0
    activity_id: str = ""
    note: str = ""
    type: ActivityType = ActivityType.SCHEDULE
    kid_id: str = ""
    user_id: str = ""

    def is_valid(self) -> None:
        self._check_base("activity_note")
        if not is_valid_id(self.activity_id):
            raise invalid("activity_note", "activity_id", self.id)
        if not is_valid_id(self.kid_id):
            raise invalid("activity_note", "kid_id", self.id)
        if len(self.note) > NOTE_MAX_LENGTH:
            raise invalid("activity_note", "note", self.id)
