"""Kids and their guardians."""

from __future__ import annotations

from kinderhub.model.base import EntityModel, PatchModel, invalid, is_valid_id

KID_NAME_MAX_RUNES = 24
KID_NICK_NAME_MAX_RUNES = 64
KID_DESCRIPTION_MAX_LENGTH = 255

MAX_ACTIVE_GUARDIANS = 3

# Fields an update copies from the submitted kid onto the stored one.
KID_UPDATABLE_FIELDS = (
    "first_name",
    "last_name",
    "nick_name",
    "avatar",
    "cover",
    "description",
    "dob",
    "gender",
    "class_id",
)


class Kid(EntityModel):
    delete_at: int = 0
    first_name: str = ""
    last_name: str = ""
    nick_name: str = ""
    avatar: str = ""
    cover: str = ""
    description: str = ""
    dob: int = 0
    gender: str = ""
    class_id: str = ""
    invite_id: str = ""

    def is_valid(self) -> None:
        self._check_base("kid")
        if not 0 < len(self.first_name) <= KID_NAME_MAX_RUNES:
            raise invalid("kid", "first_name", self.id)
        if not 0 < len(self.last_name) <= KID_NAME_MAX_RUNES:
            raise invalid("kid", "last_name", self.id)
        if len(self.nick_name) > KID_NICK_NAME_MAX_RUNES:
            raise invalid("kid", "nick_name", self.id)
        if len(self.description) > KID_DESCRIPTION_MAX_LENGTH:
            raise invalid("kid", "description", self.id)
        if not is_valid_id(self.class_id):
            raise invalid("kid", "class_id", self.id)


class KidPatch(PatchModel):
    first_name: str | None = None
    last_name: str | None = None
    nick_name: str | None = None
    avatar: str | None = None
    cover: str | None = None
    description: str | None = None
    dob: int | None = None
    gender: str | None = None
    class_id: str | None = None


class KidGuardian(EntityModel):
    kid_id: str = ""
    user_id: str = ""
    is_parent: bool = True
    delete_at: int = 0

    def is_valid(self) -> None:
        if not is_valid_id(self.kid_id):
            raise invalid("kid_guardian", "kid_id")
        if not is_valid_id(self.user_id):
            raise invalid("kid_guardian", "user_id")

    @property
    def is_active(self) -> bool:
        return self.delete_at == 0
