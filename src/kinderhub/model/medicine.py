"""Medicine requests handed in by guardians and the medicines they list."""

from __future__ import annotations

from pydantic import Field

from kinderhub.model.base import EntityModel, PatchModel, invalid, is_valid_id

MEDICINE_NAME_MAX_LENGTH = 128
MEDICINE_NOTE_MAX_LENGTH = 128

MEDICINE_REQUEST_UPDATABLE_FIELDS = ("from_date", "to_date", "confirmed", "confirm_by")


class Medicine(EntityModel):
    request_id: str = ""
    subject: str = ""
    note: str = ""
    dosage: str = ""

    def is_valid(self) -> None:
        self._check_base("medicine")
        if not is_valid_id(self.request_id):
            raise invalid("medicine", "request_id", self.id)
        if not 0 < len(self.subject) <= MEDICINE_NAME_MAX_LENGTH:
            raise invalid("medicine", "subject", self.id)
        if len(self.dosage) > MEDICINE_NOTE_MAX_LENGTH:
            raise invalid("medicine", "dosage", self.id)
        if len(self.note) > MEDICINE_NOTE_MAX_LENGTH:
            raise invalid("medicine", "note", self.id)


class MedicineRequest(EntityModel):
    delete_at: int = 0
    kid_id: str = ""
    create_by: str = ""
    from_date: int = 0
    to_date: int = 0
    confirmed: bool = False
    confirm_by: str = ""
    medicines: list[Medicine] = Field(default_factory=list)

    def is_valid(self) -> None:
        self._check_base("medicine_request")
        if not is_valid_id(self.kid_id):
            raise invalid("medicine_request", "kid_id", self.id)
        if not self.create_by:
            raise invalid("medicine_request", "create_by", self.id)
        if self.from_date == 0:
            raise invalid("medicine_request", "from_date", self.id)
        if self.to_date == 0 or self.to_date < self.from_date:
            raise invalid("medicine_request", "to_date", self.id)


class MedicineRequestPatch(PatchModel):
    from_date: int | None = None
    to_date: int | None = None
    confirmed: bool | None = None
    confirm_by: str | None = None
