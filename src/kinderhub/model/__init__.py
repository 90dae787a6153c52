"""Domain model of kinderhub.

Entities are Pydantic models sharing one lifecycle
(``pre_save`` / ``pre_update`` / ``is_valid``); patch models carry the
optional fields a PATCH request may change.
"""

from kinderhub.model.activity import (
    ActivityNote,
    ActivityType,
    Menu,
    MenuPatch,
    Schedule,
    SchedulePatch,
)
from kinderhub.model.base import EntityModel, PatchModel, get_millis, new_id
from kinderhub.model.emoji import Emoji, Reaction
from kinderhub.model.event import Event, EventPatch, EventRegistration
from kinderhub.model.health import VACCINE_BOOK, Health, HealthPatch, Vaccine, VaccineBook
from kinderhub.model.kid import Kid, KidGuardian, KidPatch
from kinderhub.model.medicine import Medicine, MedicineRequest, MedicineRequestPatch
from kinderhub.model.role import Role, RolePatch, Scheme, SchemePatch
from kinderhub.model.school import (
    Branch,
    BranchPatch,
    ClassPatch,
    School,
    SchoolClass,
    SchoolMember,
    SchoolPatch,
)
from kinderhub.model.user import Session, User, UserPatch

__all__ = [
    "ActivityNote",
    "ActivityType",
    "Branch",
    "BranchPatch",
    "ClassPatch",
    "Emoji",
    "EntityModel",
    "Event",
    "EventPatch",
    "EventRegistration",
    "Health",
    "HealthPatch",
    "Kid",
    "KidGuardian",
    "KidPatch",
    "Medicine",
    "MedicineRequest",
    "MedicineRequestPatch",
    "Menu",
    "MenuPatch",
    "PatchModel",
    "Reaction",
    "Role",
    "RolePatch",
    "Schedule",
    "SchedulePatch",
    "Scheme",
    "SchemePatch",
    "School",
    "SchoolClass",
    "SchoolMember",
    "SchoolPatch",
    "Session",
    "User",
    "UserPatch",
    "VACCINE_BOOK",
    "Vaccine",
    "VaccineBook",
    "get_millis",
    "new_id",
]
