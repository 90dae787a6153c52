"""Roles and the permission schemes that group them."""

from __future__ import annotations

import re

from pydantic import Field

from kinderhub.model.base import EntityModel, PatchModel, invalid

ROLE_NAME_MAX_LENGTH = 64
ROLE_DISPLAY_NAME_MAX_LENGTH = 128
ROLE_DESCRIPTION_MAX_LENGTH = 1024

SCHEME_NAME_MAX_LENGTH = 64
SCHEME_DISPLAY_NAME_MAX_LENGTH = 128
SCHEME_DESCRIPTION_MAX_LENGTH = 1024

SCHEME_SCOPE_SCHOOL = "school"

_ROLE_NAME_RE = re.compile(r"^[a-z0-9_]+$")


class Role(EntityModel):
    delete_at: int = 0
    name: str = ""
    display_name: str = ""
    description: str = ""
    permissions: list[str] = Field(default_factory=list)
    scheme_managed: bool = False
    built_in: bool = False

    def is_valid(self) -> None:
        self._check_base("role")
        self.is_valid_without_id()

    def is_valid_without_id(self) -> None:
        if not 0 < len(self.name) <= ROLE_NAME_MAX_LENGTH or not _ROLE_NAME_RE.match(self.name):
            raise invalid("role", "name", self.id)
        if not 0 < len(self.display_name) <= ROLE_DISPLAY_NAME_MAX_LENGTH:
            raise invalid("role", "display_name", self.id)
        if len(self.description) > ROLE_DESCRIPTION_MAX_LENGTH:
            raise invalid("role", "description", self.id)


class RolePatch(PatchModel):
    permissions: list[str] | None = None


class Scheme(EntityModel):
    delete_at: int = 0
    name: str = ""
    display_name: str = ""
    description: str = ""
    scope: str = SCHEME_SCOPE_SCHOOL
    default_school_admin_role: str = ""
    default_school_teacher_role: str = ""
    default_school_parent_role: str = ""

    def is_valid(self) -> None:
        self._check_base("scheme")
        if not 0 < len(self.name) <= SCHEME_NAME_MAX_LENGTH:
            raise invalid("scheme", "name", self.id)
        if not 0 < len(self.display_name) <= SCHEME_DISPLAY_NAME_MAX_LENGTH:
            raise invalid("scheme", "display_name", self.id)
        if len(self.description) > SCHEME_DESCRIPTION_MAX_LENGTH:
            raise invalid("scheme", "description", self.id)
        if self.scope != SCHEME_SCOPE_SCHOOL:
            raise invalid("scheme", "scope", self.id)
        for role_name in (
            self.default_school_admin_role,
            self.default_school_teacher_role,
            self.default_school_parent_role,
        ):
            if not role_name:
                raise invalid("scheme", "default_roles", self.id)


class SchemePatch(PatchModel):
    name: str | None = None
    display_name: str | None = None
    description: str | None = None
