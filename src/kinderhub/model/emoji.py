"""Custom emoji and the reactions users leave on events and activity notes."""

from __future__ import annotations

import re

from kinderhub.model.base import EntityModel, invalid, is_valid_id

EMOJI_NAME_MAX_LENGTH = 64
EMOJI_SORT_BY_NAME = "name"

_EMOJI_NAME_RE = re.compile(r"^[a-zA-Z0-9\-+_]+$")

SYSTEM_EMOJI_NAMES = frozenset(
    {"+1", "-1", "heart", "laughing", "star", "tada", "thumbsup", "thumbsdown"}
)


def is_valid_emoji_name(name: str) -> bool:
    return 0 < len(name) <= EMOJI_NAME_MAX_LENGTH and bool(_EMOJI_NAME_RE.match(name))


class Emoji(EntityModel):
    delete_at: int = 0
    creator_id: str = ""
    name: str = ""

    def is_valid(self) -> None:
        self._check_base("emoji")
        if not self.creator_id:
            raise invalid("emoji", "creator_id", self.id)
        if not is_valid_emoji_name(self.name):
            raise invalid("emoji", "name", self.id)


class Reaction(EntityModel):
    """A user's emoji reaction on a target (an event or an activity note)."""

    user_id: str = ""
    target_id: str = ""
    emoji_name: str = ""

    def is_valid(self) -> None:
        if not self.user_id:
            raise invalid("reaction", "user_id")
        if not is_valid_id(self.target_id):
            raise invalid("reaction", "target_id")
        if not is_valid_emoji_name(self.emoji_name):
            raise invalid("reaction", "emoji_name")
