"""Users and request sessions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from kinderhub.model.base import EntityModel, PatchModel, invalid, is_valid_email

USERNAME_MAX_LENGTH = 64
USER_NAME_PART_MAX_RUNES = 64
USER_EMAIL_MAX_LENGTH = 128

_USERNAME_RE = re.compile(r"^[a-z0-9.\-_]+$")

USER_UPDATABLE_FIELDS = ("username", "email", "first_name", "last_name", "nickname", "locale")


class User(EntityModel):
    delete_at: int = 0
    username: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    nickname: str = ""
    roles: str = "system_user"
    locale: str = "en"

    def pre_save(self) -> None:
        super().pre_save()
        self.username = self.username.lower()
        self.email = self.email.lower()

    def pre_update(self) -> None:
        super().pre_update()
        self.username = self.username.lower()
        self.email = self.email.lower()

    def is_valid(self) -> None:
        self._check_base("user")
        if not 0 < len(self.username) <= USERNAME_MAX_LENGTH or not _USERNAME_RE.match(
            self.username
        ):
            raise invalid("user", "username", self.id)
        if len(self.email) > USER_EMAIL_MAX_LENGTH or not is_valid_email(self.email):
            raise invalid("user", "email", self.id)
        if len(self.first_name) > USER_NAME_PART_MAX_RUNES:
            raise invalid("user", "first_name", self.id)
        if len(self.last_name) > USER_NAME_PART_MAX_RUNES:
            raise invalid("user", "last_name", self.id)
        if len(self.nickname) > USER_NAME_PART_MAX_RUNES:
            raise invalid("user", "nickname", self.id)

    @property
    def role_names(self) -> list[str]:
        return self.roles.split()


class UserPatch(PatchModel):
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    nickname: str | None = None
    locale: str | None = None


@dataclass
class Session:
    """The authenticated caller of a request."""

    user_id: str
    roles: list[str] = field(default_factory=list)
    is_anonymous: bool = False
