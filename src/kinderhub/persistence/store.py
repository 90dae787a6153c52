"""Store interfaces.

The SQL store (``kinderhub.persistence.sqlstore``) is the source of truth.
The stores of the entities that are read far more often than written (roles,
schemes, emoji, reactions, user profiles) are declared here as abstract
classes so the local-cache layer can wrap them with read-through decorators
that callers cannot tell apart from the SQL implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from kinderhub.model import Emoji, Reaction, Role, Scheme, User

if TYPE_CHECKING:
    from kinderhub.persistence.sqlstore.activity_note import SqlActivityNoteStore
    from kinderhub.persistence.sqlstore.event import SqlEventStore
    from kinderhub.persistence.sqlstore.health import SqlHealthStore
    from kinderhub.persistence.sqlstore.kid import SqlKidStore
    from kinderhub.persistence.sqlstore.medicine import SqlMedicineStore
    from kinderhub.persistence.sqlstore.menu import SqlMenuStore
    from kinderhub.persistence.sqlstore.schedule import SqlScheduleStore
    from kinderhub.persistence.sqlstore.school import SqlSchoolStore


class RoleStore(ABC):
    @abstractmethod
    async def save(self, role: Role) -> Role:
        """Insert a role without id, otherwise update it."""

    @abstractmethod
    async def get(self, role_id: str) -> Role:
        pass

    @abstractmethod
    async def get_all(self) -> list[Role]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Role:
        pass

    @abstractmethod
    async def get_by_names(self, names: list[str]) -> list[Role]:
        """Return the roles found among ``names``; unknown names are skipped."""

    @abstractmethod
    async def delete(self, role_id: str) -> Role:
        """Soft delete a role and return it."""

    @abstractmethod
    async def permanent_delete_all(self) -> None:
        pass


class SchemeStore(ABC):
    @abstractmethod
    async def save(self, scheme: Scheme) -> Scheme:
        """Insert a scheme without id, otherwise update it."""

    @abstractmethod
    async def get(self, scheme_id: str) -> Scheme:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Scheme:
        pass

    @abstractmethod
    async def get_all_page(self, scope: str, offset: int, limit: int) -> list[Scheme]:
        pass

    @abstractmethod
    async def delete(self, scheme_id: str) -> Scheme:
        """Soft delete a scheme and return it."""

    @abstractmethod
    async def permanent_delete_all(self) -> None:
        pass


class EmojiStore(ABC):
    @abstractmethod
    async def save(self, emoji: Emoji) -> Emoji:
        pass

    @abstractmethod
    async def get(self, emoji_id: str, allow_from_cache: bool) -> Emoji:
        pass

    @abstractmethod
    async def get_by_name(self, name: str, allow_from_cache: bool) -> Emoji:
        pass

    @abstractmethod
    async def get_multiple_by_name(self, names: list[str]) -> list[Emoji]:
        pass

    @abstractmethod
    async def get_list(self, offset: int, limit: int, sort: str) -> list[Emoji]:
        pass

    @abstractmethod
    async def delete(self, emoji: Emoji, time: int) -> None:
        """Soft delete ``emoji`` at ``time`` (epoch milliseconds)."""

    @abstractmethod
    async def search(self, name: str, prefix_only: bool, limit: int) -> list[Emoji]:
        pass


class ReactionStore(ABC):
    @abstractmethod
    async def save(self, reaction: Reaction) -> Reaction:
        pass

    @abstractmethod
    async def delete(self, reaction: Reaction) -> Reaction:
        pass

    @abstractmethod
    async def get_for_target(self, target_id: str, allow_from_cache: bool) -> list[Reaction]:
        pass

    @abstractmethod
    async def delete_all_with_emoji_name(self, emoji_name: str) -> None:
        pass

    @abstractmethod
    async def permanent_delete_batch(self, end_time: int, limit: int) -> int:
        """Delete up to ``limit`` reactions created before ``end_time``."""


class UserStore(ABC):
    @abstractmethod
    async def save(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def get(self, user_id: str) -> User:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> User:
        pass

    @abstractmethod
    async def get_profile_by_ids(self, user_ids: list[str], allow_from_cache: bool) -> list[User]:
        pass

    @abstractmethod
    async def update_update_at(self, user_id: str) -> int:
        """Bump ``update_at`` of a user and return the new value."""

    @abstractmethod
    def invalidate_profile_cache_for_user(self, user_id: str) -> None:
        pass

    @abstractmethod
    def clear_caches(self) -> None:
        pass


class Store(ABC):
    """Aggregate of every entity store."""

    school: SqlSchoolStore
    kid: SqlKidStore
    health: SqlHealthStore
    medicine: SqlMedicineStore
    menu: SqlMenuStore
    schedule: SqlScheduleStore
    event: SqlEventStore
    activity_note: SqlActivityNoteStore
    user: UserStore
    role: RoleStore
    scheme: SchemeStore
    emoji: EmojiStore
    reaction: ReactionStore

    @abstractmethod
    async def init(self) -> None:
        """Create the tables."""

    @abstractmethod
    async def drop_all_tables(self) -> None:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
