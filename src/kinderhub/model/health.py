"""Health measurements, vaccinations and the vaccine book."""

from __future__ import annotations

from dataclasses import dataclass

from kinderhub.model.base import EntityModel, PatchModel, invalid, is_valid_id

VACCINE_NAME_MAX_LENGTH = 100
VACCINE_MAX_TIME = 20

HEALTH_UPDATABLE_FIELDS = ("height", "weight", "measure_at")


class Health(EntityModel):
    delete_at: int = 0
    kid_id: str = ""
    height: float = 0
    weight: float = 0
    measure_at: int = 0

    def is_valid(self) -> None:
        self._check_base("health")
        if not is_valid_id(self.kid_id):
            raise invalid("health", "kid_id", self.id)
        if self.height == 0:
            raise invalid("health", "height", self.id)
        if self.weight == 0:
            raise invalid("health", "weight", self.id)
        if self.measure_at == 0:
            raise invalid("health", "measure_at", self.id)


class HealthPatch(PatchModel):
    height: float | None = None
    weight: float | None = None
    measure_at: int | None = None


@dataclass(frozen=True)
class VaccineBook:
    """One vaccine of the national vaccination book."""

    id: int
    title: str
    times: int
    description: str = ""


VACCINE_BOOK: tuple[VaccineBook, ...] = (
    VaccineBook(1, "Tuberculosis", 1),
    VaccineBook(2, "Hepatitis B", 6),
    VaccineBook(3, "Diphtheria - Tetanus - Pertussis", 5),
    VaccineBook(4, "Poliovirus", 5),
    VaccineBook(5, "Haemophilus Influenza Type B meningitis", 4),
    VaccineBook(6, "Rotavirus diarrhea", 3),
    VaccineBook(7, "Pneumococcal", 4),
    VaccineBook(8, "Meningococcal BC", 2),
    VaccineBook(9, "Influenza", 10),
    VaccineBook(10, "Measles", 1),
    VaccineBook(11, "Measles - Mumps - Rubella", 2),
    VaccineBook(12, "Varicella", 2),
    VaccineBook(13, "Japanese Encephalitis", 6),
    VaccineBook(14, "Hepatitis A", 2),
    VaccineBook(15, "Meningococcal AC", 7),
    VaccineBook(16, "Typhoid", 3),
    VaccineBook(17, "Cervical cancer (HPV)", 3),
    VaccineBook(18, "Dengue Fever", 3),
)

_VACCINE_BOOK_BY_ID = {entry.id: entry for entry in VACCINE_BOOK}


def get_vaccine_book_entry(vaccine_book_id: int) -> VaccineBook | None:
    return _VACCINE_BOOK_BY_ID.get(vaccine_book_id)


class Vaccine(EntityModel):
    delete_at: int = 0
    kid_id: str = ""
    vaccine_book_id: int = 0
    vaccine_name: str = ""
    time: int = 0
    date: int = 0
    place: str = ""

    def is_valid(self) -> None:
        self._check_base("vaccine")
        if not is_valid_id(self.kid_id):
            raise invalid("vaccine", "kid_id", self.id)
        if self.vaccine_book_id == 0 or get_vaccine_book_entry(self.vaccine_book_id) is None:
            raise invalid("vaccine", "vaccine_book_id", self.id)
        if not 0 < len(self.vaccine_name) <= VACCINE_NAME_MAX_LENGTH:
            raise invalid("vaccine", "vaccine_name", self.id)
        if not 0 < self.time <= VACCINE_MAX_TIME:
            raise invalid("vaccine", "time", self.id)
        if self.date == 0:
            raise invalid("vaccine", "date", self.id)
