"""Read-through store decorators of the local-cache layer.

Each decorator implements the same interface as the store it wraps. Reads
are served from the cache when possible and backfilled from the base store
on a miss. Writes reach the base store first and then invalidate the
affected key through ``LocalCacheLayer.invalidate_local_and_broadcast``.
Cached models are copied on the way in and out so callers never share an
instance with the cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kinderhub.model import Emoji, Reaction, Role, Scheme, User
from kinderhub.persistence.store import (
    EmojiStore,
    ReactionStore,
    RoleStore,
    SchemeStore,
    UserStore,
)

if TYPE_CHECKING:
    from kinderhub.cache.layer import LocalCacheLayer


class LocalCacheRoleStore(RoleStore):
    """Roles cached by name."""

    def __init__(self, base: RoleStore, root: LocalCacheLayer):
        self.base = base
        self.root = root

    async def save(self, role: Role) -> Role:
        saved = await self.base.save(role)
        self.root.invalidate_local_and_broadcast(self.root.role_cache, saved.name)
        return saved

    async def get(self, role_id: str) -> Role:
        return await self.base.get(role_id)

    async def get_all(self) -> list[Role]:
        return await self.base.get_all()

    async def get_by_name(self, name: str) -> Role:
        cached, found = self.root.read_cache(self.root.role_cache, name)
        if found:
            return cached.model_copy(deep=True)

        role = await self.base.get_by_name(name)
        self.root.add_to_cache(self.root.role_cache, name, role.model_copy(deep=True))
        return role

    async def get_by_names(self, names: list[str]) -> list[Role]:
        found_roles: list[Role] = []
        missing: list[str] = []
        for name in names:
            cached, found = self.root.read_cache(self.root.role_cache, name)
            if found:
                found_roles.append(cached.model_copy(deep=True))
            else:
                missing.append(name)

        if missing:
            for role in await self.base.get_by_names(missing):
                self.root.add_to_cache(self.root.role_cache, role.name, role.model_copy(deep=True))
                found_roles.append(role)

        return found_roles

    async def delete(self, role_id: str) -> Role:
        role = await self.base.delete(role_id)
        self.root.invalidate_local_and_broadcast(self.root.role_cache, role.name)
        return role

    async def permanent_delete_all(self) -> None:
        await self.base.permanent_delete_all()
        self.root.clear_all_and_broadcast(self.root.role_cache)


class LocalCacheSchemeStore(SchemeStore):
    """Schemes cached by id."""

    def __init__(self, base: SchemeStore, root: LocalCacheLayer):
        self.base = base
        self.root = root

    async def save(self, scheme: Scheme) -> Scheme:
        saved = await self.base.save(scheme)
        self.root.invalidate_local_and_broadcast(self.root.scheme_cache, saved.id)
        return saved

    async def get(self, scheme_id: str) -> Scheme:
        cached, found = self.root.read_cache(self.root.scheme_cache, scheme_id)
        if found:
            return cached.model_copy(deep=True)

        scheme = await self.base.get(scheme_id)
        self.root.add_to_cache(self.root.scheme_cache, scheme_id, scheme.model_copy(deep=True))
        return scheme

    async def get_by_name(self, name: str) -> Scheme:
        return await self.base.get_by_name(name)

    async def get_all_page(self, scope: str, offset: int, limit: int) -> list[Scheme]:
        return await self.base.get_all_page(scope, offset, limit)

    async def delete(self, scheme_id: str) -> Scheme:
        scheme = await self.base.delete(scheme_id)
        self.root.invalidate_local_and_broadcast(self.root.scheme_cache, scheme_id)
        return scheme

    async def permanent_delete_all(self) -> None:
        await self.base.permanent_delete_all()
        self.root.clear_all_and_broadcast(self.root.scheme_cache)


class LocalCacheEmojiStore(EmojiStore):
    """Emoji cached by id, plus a name to id index."""

    def __init__(self, base: EmojiStore, root: LocalCacheLayer):
        self.base = base
        self.root = root

    def _add_to_cache(self, emoji: Emoji) -> None:
        self.root.add_to_cache(self.root.emoji_cache_by_id, emoji.id, emoji.model_copy(deep=True))
        self.root.add_to_cache(self.root.emoji_id_cache_by_name, emoji.name, emoji.id)

    def _get_from_cache_by_id(self, emoji_id: str) -> Emoji | None:
        cached, found = self.root.read_cache(self.root.emoji_cache_by_id, emoji_id)
        if found:
            return cached.model_copy(deep=True)
        return None

    async def save(self, emoji: Emoji) -> Emoji:
        return await self.base.save(emoji)

    async def get(self, emoji_id: str, allow_from_cache: bool) -> Emoji:
        if allow_from_cache:
            cached = self._get_from_cache_by_id(emoji_id)
            if cached is not None:
                return cached

        emoji = await self.base.get(emoji_id, allow_from_cache)
        if allow_from_cache:
            self._add_to_cache(emoji)
        return emoji

    async def get_by_name(self, name: str, allow_from_cache: bool) -> Emoji:
        if allow_from_cache:
            emoji_id, found = self.root.read_cache(self.root.emoji_id_cache_by_name, name)
            if found:
                cached = self._get_from_cache_by_id(emoji_id)
                if cached is not None:
                    return cached

        emoji = await self.base.get_by_name(name, allow_from_cache)
        if allow_from_cache:
            self._add_to_cache(emoji)
        return emoji

    async def get_multiple_by_name(self, names: list[str]) -> list[Emoji]:
        return await self.base.get_multiple_by_name(names)

    async def get_list(self, offset: int, limit: int, sort: str) -> list[Emoji]:
        return await self.base.get_list(offset, limit, sort)

    async def delete(self, emoji: Emoji, time: int) -> None:
        await self.base.delete(emoji, time)
        self.root.invalidate_local_and_broadcast(self.root.emoji_cache_by_id, emoji.id)
        self.root.invalidate_local_and_broadcast(self.root.emoji_id_cache_by_name, emoji.name)

    async def search(self, name: str, prefix_only: bool, limit: int) -> list[Emoji]:
        return await self.base.search(name, prefix_only, limit)


class LocalCacheReactionStore(ReactionStore):
    """Reactions cached per target."""

    def __init__(self, base: ReactionStore, root: LocalCacheLayer):
        self.base = base
        self.root = root

    async def save(self, reaction: Reaction) -> Reaction:
        saved = await self.base.save(reaction)
        self.root.invalidate_local_and_broadcast(self.root.reaction_cache, reaction.target_id)
        return saved

    async def delete(self, reaction: Reaction) -> Reaction:
        deleted = await self.base.delete(reaction)
        self.root.invalidate_local_and_broadcast(self.root.reaction_cache, reaction.target_id)
        return deleted

    async def get_for_target(self, target_id: str, allow_from_cache: bool) -> list[Reaction]:
        if allow_from_cache:
            cached, found = self.root.read_cache(self.root.reaction_cache, target_id)
            if found:
                return [reaction.model_copy() for reaction in cached]

        reactions = await self.base.get_for_target(target_id, allow_from_cache)
        if allow_from_cache:
            self.root.add_to_cache(
                self.root.reaction_cache,
                target_id,
                [reaction.model_copy() for reaction in reactions],
            )
        return reactions

    async def delete_all_with_emoji_name(self, emoji_name: str) -> None:
        await self.base.delete_all_with_emoji_name(emoji_name)
        # Any target may have carried the emoji
        self.root.clear_all_and_broadcast(self.root.reaction_cache)

    async def permanent_delete_batch(self, end_time: int, limit: int) -> int:
        deleted = await self.base.permanent_delete_batch(end_time, limit)
        self.root.clear_all_and_broadcast(self.root.reaction_cache)
        return deleted


class LocalCacheUserStore(UserStore):
    """User profiles cached by user id."""

    def __init__(self, base: UserStore, root: LocalCacheLayer):
        self.base = base
        self.root = root

    async def save(self, user: User) -> User:
        return await self.base.save(user)

    async def update(self, user: User) -> User:
        updated = await self.base.update(user)
        self.invalidate_profile_cache_for_user(user.id)
        return updated

    async def get(self, user_id: str) -> User:
        return await self.base.get(user_id)

    async def get_by_username(self, username: str) -> User:
        return await self.base.get_by_username(username)

    async def get_profile_by_ids(self, user_ids: list[str], allow_from_cache: bool) -> list[User]:
        if not allow_from_cache:
            return await self.base.get_profile_by_ids(user_ids, False)

        users: list[User] = []
        remaining: list[str] = []
        for user_id in user_ids:
            cached, found = self.root.read_cache(self.root.user_profile_by_ids_cache, user_id)
            if found:
                users.append(cached.model_copy(deep=True))
            else:
                remaining.append(user_id)

        if remaining:
            for user in await self.base.get_profile_by_ids(remaining, allow_from_cache):
                self.root.add_to_cache(
                    self.root.user_profile_by_ids_cache, user.id, user.model_copy(deep=True)
                )
                users.append(user)

        return users

    async def update_update_at(self, user_id: str) -> int:
        update_at = await self.base.update_update_at(user_id)
        self.invalidate_profile_cache_for_user(user_id)
        return update_at

    def invalidate_profile_cache_for_user(self, user_id: str) -> None:
        self.root.invalidate_local_and_broadcast(self.root.user_profile_by_ids_cache, user_id)

    def clear_caches(self) -> None:
        self.root.clear_all_and_broadcast(self.root.user_profile_by_ids_cache)
