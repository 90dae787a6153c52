"""Schools, their members, branches and classes."""

from __future__ import annotations

from kinderhub.errors import BadRequestError
from kinderhub.model.base import (
    EntityModel,
    PatchModel,
    invalid,
    is_valid_alpha_num,
    is_valid_email,
    is_valid_id,
    new_id,
)

SCHOOL_CONTACT_NAME_MAX_LENGTH = 64
SCHOOL_DESCRIPTION_MAX_LENGTH = 255
SCHOOL_NAME_MAX_RUNES = 128
SCHOOL_NAME_MIN_LENGTH = 2
SCHOOL_EMAIL_MAX_LENGTH = 128
SCHOOL_ADDRESS_MAX_LENGTH = 255
SCHOOL_PHONE_MAX_LENGTH = 11

BRANCH_NAME_MAX_RUNES = 128
BRANCH_DESCRIPTION_MAX_LENGTH = 255

CLASS_NAME_MAX_RUNES = 128
CLASS_DESCRIPTION_MAX_LENGTH = 255

RESERVED_NAMES = (
    "admin",
    "api",
    "channel",
    "claim",
    "error",
    "files",
    "help",
    "landing",
    "login",
    "mfa",
    "oauth",
    "plug",
    "plugins",
    "post",
    "signup",
)


def is_reserved_school_name(name: str) -> bool:
    lowered = name.lower()
    return any(lowered.startswith(reserved) for reserved in RESERVED_NAMES)


def is_valid_school_name(name: str) -> bool:
    return len(name) >= SCHOOL_NAME_MIN_LENGTH and is_valid_alpha_num(name)


class School(EntityModel):
    delete_at: int = 0
    name: str = ""
    description: str = ""
    email: str = ""
    phone: str = ""
    contact_name: str = ""
    address: str = ""
    invite_id: str = ""
    allow_open_invite: bool = False
    scheme_id: str | None = None

    def pre_save(self) -> None:
        super().pre_save()
        if not self.invite_id:
            self.invite_id = new_id()

    def is_valid(self) -> None:
        self._check_base("school")
        if len(self.email) > SCHOOL_EMAIL_MAX_LENGTH:
            raise invalid("school", "email", self.id)
        if self.email and not is_valid_email(self.email):
            raise invalid("school", "email", self.id)
        if not 0 < len(self.name) <= SCHOOL_NAME_MAX_RUNES:
            raise invalid("school", "name", self.id)
        if len(self.description) > SCHOOL_DESCRIPTION_MAX_LENGTH:
            raise invalid("school", "description", self.id)
        if len(self.address) > SCHOOL_ADDRESS_MAX_LENGTH:
            raise invalid("school", "address", self.id)
        if len(self.phone) > SCHOOL_PHONE_MAX_LENGTH:
            raise invalid("school", "phone", self.id)
        if not self.invite_id:
            raise invalid("school", "invite_id", self.id)
        if is_reserved_school_name(self.name):
            raise invalid("school", "reserved", self.id)
        if not is_valid_school_name(self.name):
            raise invalid("school", "characters", self.id)
        if len(self.contact_name) > SCHOOL_CONTACT_NAME_MAX_LENGTH:
            raise invalid("school", "contact", self.id)

    def sanitize(self) -> None:
        self.email = ""


class SchoolPatch(PatchModel):
    name: str | None = None
    description: str | None = None
    contact_name: str | None = None
    phone: str | None = None
    address: str | None = None
    allow_open_invite: bool | None = None


class SchoolMember(EntityModel):
    """Membership of a user in a school.

    The ``scheme_*`` flags map the member onto the admin, teacher and parent
    roles of the school's permission scheme.
    """

    school_id: str = ""
    user_id: str = ""
    roles: str = ""
    delete_at: int = 0
    scheme_admin: bool = False
    scheme_teacher: bool = False
    scheme_parent: bool = False

    def is_valid(self) -> None:
        if not is_valid_id(self.school_id):
            raise invalid("school_member", "school_id")
        if not is_valid_id(self.user_id):
            raise invalid("school_member", "user_id")

    @property
    def role_names(self) -> list[str]:
        return self.roles.split()


class Branch(EntityModel):
    delete_at: int = 0
    school_id: str = ""
    name: str = ""
    description: str = ""
    creator_id: str = ""

    def is_valid(self) -> None:
        self._check_base("branch")
        if not is_valid_id(self.school_id):
            raise invalid("branch", "school_id", self.id)
        if not 0 < len(self.name) <= BRANCH_NAME_MAX_RUNES:
            raise invalid("branch", "name", self.id)
        if len(self.description) > BRANCH_DESCRIPTION_MAX_LENGTH:
            raise invalid("branch", "description", self.id)


class BranchPatch(PatchModel):
    name: str | None = None
    description: str | None = None


class SchoolClass(EntityModel):
    delete_at: int = 0
    school_id: str = ""
    branch_id: str = ""
    name: str = ""
    description: str = ""
    invite_id: str = ""
    allow_open_invite: bool = False
    creator_id: str = ""

    def pre_save(self) -> None:
        super().pre_save()
        if not self.invite_id:
            self.invite_id = new_id()

    def is_valid(self) -> None:
        self._check_base("class")
        if not is_valid_id(self.school_id):
            raise invalid("class", "school_id", self.id)
        if self.branch_id and not is_valid_id(self.branch_id):
            raise invalid("class", "branch_id", self.id)
        if not 0 < len(self.name) <= CLASS_NAME_MAX_RUNES:
            raise invalid("class", "name", self.id)
        if len(self.description) > CLASS_DESCRIPTION_MAX_LENGTH:
            raise invalid("class", "description", self.id)

    def sanitize(self) -> None:
        self.invite_id = ""

    def ensure_belongs_to_school(self, school_id: str) -> None:
        if self.school_id != school_id:
            raise BadRequestError(
                code="model.class.belong_to_school.app_error",
                text="The class does not belong to the school",
                where="Class.ensure_belongs_to_school",
                detail=f"class_id={self.id} school_id={school_id}",
            )


class ClassPatch(PatchModel):
    name: str | None = None
    description: str | None = None
    branch_id: str | None = None
