"""Shared building blocks of the domain model.

Entities are Pydantic v2 models. Identifiers are 26 character strings built
from a random UUID with a lowercase base32 alphabet, timestamps are epoch
milliseconds. Each entity follows the same lifecycle:

- ``pre_save()`` assigns the id and the creation timestamps
- ``pre_update()`` bumps ``update_at``
- ``is_valid()`` raises ``BadRequestError`` naming the offending field
"""

from __future__ import annotations

import base64
import re
import time
import uuid

from pydantic import BaseModel

from kinderhub.errors import BadRequestError

ID_LENGTH = 26

_ENCODING = "ybndrfg8ejkmcpqxot1uwisza345h769"
_STD_B32 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_TRANSLATION = str.maketrans(_STD_B32, _ENCODING)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_ALPHA_NUM_RE = re.compile(r"^[a-z0-9]+([a-z\-0-9]+|(__)?)[a-z0-9]+$")


def new_id() -> str:
    """Return a globally unique 26 character identifier."""
    encoded = base64.b32encode(uuid.uuid4().bytes).decode("ascii")
    return encoded.translate(_TRANSLATION)[:ID_LENGTH]


def get_millis() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_valid_id(value: str) -> bool:
    return len(value) == ID_LENGTH and value.isalnum()


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value)) and value.lower() == value


def is_valid_alpha_num(value: str) -> bool:
    return bool(_ALPHA_NUM_RE.match(value))


def invalid(entity: str, field: str, entity_id: str = "") -> BadRequestError:
    """Build the validation error for ``entity.field``."""
    return BadRequestError(
        code=f"model.{entity}.is_valid.{field}.app_error",
        text=f"Invalid {field.replace('_', ' ')} for {entity.replace('_', ' ')}",
        where=f"{entity}.is_valid",
        detail=f"id={entity_id}" if entity_id else None,
    )


class EntityModel(BaseModel):
    """Base model for persisted entities."""

    model_config = {
        "extra": "ignore",
        "from_attributes": True,
        "populate_by_name": True,
    }

    id: str = ""
    create_at: int = 0
    update_at: int = 0

    def pre_save(self) -> None:
        if not self.id:
            self.id = new_id()
        self.create_at = get_millis()
        self.update_at = self.create_at

    def pre_update(self) -> None:
        self.update_at = get_millis()

    def _check_base(self, entity: str) -> None:
        if not is_valid_id(self.id):
            raise invalid(entity, "id")
        if self.create_at == 0:
            raise invalid(entity, "create_at", self.id)
        if self.update_at == 0:
            raise invalid(entity, "update_at", self.id)

    def is_valid(self) -> None:
        raise NotImplementedError

    def apply_patch(self, patch: BaseModel) -> None:
        """Copy every field set on ``patch`` onto this entity."""
        for name, value in patch.model_dump(exclude_none=True).items():
            setattr(self, name, value)

    def copy_fields(self, other: EntityModel, fields: tuple[str, ...]) -> None:
        """Copy the named fields from ``other``."""
        for name in fields:
            setattr(self, name, getattr(other, name))


class PatchModel(BaseModel):
    """Base model for partial updates; unset fields stay ``None``."""

    model_config = {"extra": "ignore"}

