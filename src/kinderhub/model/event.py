"""Class events and the kids registered for them."""

from __future__ import annotations

from kinderhub.model.base import EntityModel, PatchModel, invalid, is_valid_id

EVENT_TITLE_MAX_LENGTH = 128
EVENT_DESCRIPTION_MAX_LENGTH = 255

EVENT_UPDATABLE_FIELDS = (
    "title",
    "description",
    "note",
    "picture",
    "fee",
    "start_time",
    "end_time",
    "register_expired",
    "is_all_class",
    "active",
)


class Event(EntityModel):
    delete_at: int = 0
    class_id: str = ""
    title: str = ""
    description: str = ""
    note: str = ""
    picture: str = ""
    fee: float = 0
    start_time: int = 0
    end_time: int = 0
    register_expired: int = 0
    is_all_class: bool = False
    active: bool = True

    def pre_save(self) -> None:
        super().pre_save()
        self.active = True

    def is_valid(self) -> None:
        self._check_base("event")
        if not is_valid_id(self.class_id):
            raise invalid("event", "class_id", self.id)
        if self.start_time == 0:
            raise invalid("event", "start_time", self.id)
        if self.end_time == 0 or self.end_time < self.start_time:
            raise invalid("event", "end_time", self.id)
        if not 0 < len(self.title) <= EVENT_TITLE_MAX_LENGTH:
            raise invalid("event", "title", self.id)
        if len(self.description) > EVENT_DESCRIPTION_MAX_LENGTH:
            raise invalid("event", "description", self.id)


class EventPatch(PatchModel):
    title: str | None = None
    description: str | None = None
    note: str | None = None
    picture: str | None = None
    fee: float | None = None
    start_time: int | None = None
    end_time: int | None = None
    register_expired: int | None = None
    is_all_class: bool | None = None
    active: bool | None = None


class EventRegistration(EntityModel):
    delete_at: int = 0
    event_id: str = ""
    kid_id: str = ""
    paid: bool = False
    register_by: str = ""

    def is_valid(self) -> None:
        self._check_base("event_registration")
        if not is_valid_id(self.event_id):
            raise invalid("event_registration", "event_id", self.id)
        if not is_valid_id(self.kid_id):
            raise invalid("event_registration", "kid_id", self.id)
        if not self.register_by:
            raise invalid("event_registration", "register_by", self.id)
