"""Local-cache store layer.

``LocalCacheLayer`` wraps a base ``Store`` and replaces the role, scheme,
emoji, reaction and user stores with read-through decorators backed by
in-process caches. Writes go to the base store first; the affected cache
entry is then removed locally and the removal is broadcast so the other
nodes of the cluster drop their copy too.

Example:
    layer = LocalCacheLayer(SqlStore(engine), cluster)
    await cluster.start()

    role = await layer.role.get_by_name("school_admin")  # cached from now on
"""

from __future__ import annotations

import logging
from typing import Any

from kinderhub.cache.cluster import Cluster, ClusterEvent, ClusterMessage, SendType
from kinderhub.cache.provider import CacheProvider, NamedCache
from kinderhub.cache.stores import (
    LocalCacheEmojiStore,
    LocalCacheReactionStore,
    LocalCacheRoleStore,
    LocalCacheSchemeStore,
    LocalCacheUserStore,
)
from kinderhub.config import settings
from kinderhub.persistence.store import Store

logger = logging.getLogger(__name__)

# Payload of a message asking peers to clear a whole cache
CLEAR_CACHE_MESSAGE_DATA = ""


class LocalCacheLayer(Store):
    """Store decorator adding read-through caches with cluster invalidation."""

    def __init__(
        self,
        base: Store,
        cluster: Cluster | None = None,
        provider: CacheProvider | None = None,
    ):
        self.base = base
        self.cluster = cluster
        provider = provider or CacheProvider()

        self.reaction_cache = provider.new_cache(
            "Reaction",
            settings.reaction_cache_size,
            settings.reaction_cache_seconds,
            ClusterEvent.INVALIDATE_CACHE_FOR_REACTIONS,
        )
        self.role_cache = provider.new_cache(
            "Role",
            settings.role_cache_size,
            settings.role_cache_seconds,
            ClusterEvent.INVALIDATE_CACHE_FOR_ROLES,
        )
        self.scheme_cache = provider.new_cache(
            "Scheme",
            settings.scheme_cache_size,
            settings.scheme_cache_seconds,
            ClusterEvent.INVALIDATE_CACHE_FOR_SCHEMES,
        )
        self.emoji_cache_by_id = provider.new_cache(
            "EmojiById",
            settings.emoji_cache_size,
            settings.emoji_cache_seconds,
            ClusterEvent.INVALIDATE_CACHE_FOR_EMOJIS_BY_ID,
        )
        self.emoji_id_cache_by_name = provider.new_cache(
            "EmojiByName",
            settings.emoji_cache_size,
            settings.emoji_cache_seconds,
            ClusterEvent.INVALIDATE_CACHE_FOR_EMOJIS_ID_BY_NAME,
        )
        self.user_profile_by_ids_cache = provider.new_cache(
            "UserProfileByIds",
            settings.user_profile_by_ids_cache_size,
            settings.user_profile_by_ids_cache_seconds,
            ClusterEvent.INVALIDATE_CACHE_FOR_PROFILE_BY_IDS,
        )

        # Stores without a cache are served by the base store directly
        self.school = base.school
        self.kid = base.kid
        self.health = base.health
        self.medicine = base.medicine
        self.menu = base.menu
        self.schedule = base.schedule
        self.event = base.event
        self.activity_note = base.activity_note

        self.reaction = LocalCacheReactionStore(base.reaction, self)
        self.role = LocalCacheRoleStore(base.role, self)
        self.scheme = LocalCacheSchemeStore(base.scheme, self)
        self.emoji = LocalCacheEmojiStore(base.emoji, self)
        self.user = LocalCacheUserStore(base.user, self)

        if cluster is not None:
            for cache in self.caches:
                cluster.register_handler(cache.invalidation_event, self._cluster_handler(cache))
            cluster.register_handler(ClusterEvent.INVALIDATE_ALL_CACHES, self._handle_invalidate_all)
            cluster.register_handler(ClusterEvent.INVALIDATE_CACHE_FOR_USER, self._handle_invalidate_user)

    @property
    def caches(self) -> list[NamedCache]:
        return [
            self.reaction_cache,
            self.role_cache,
            self.scheme_cache,
            self.emoji_cache_by_id,
            self.emoji_id_cache_by_name,
            self.user_profile_by_ids_cache,
        ]

    # -------------------------------------------------------------------------
    # Cache helpers used by the decorators
    # -------------------------------------------------------------------------

    def read_cache(self, cache: NamedCache, key: str) -> tuple[Any, bool]:
        return cache.get(key)

    def add_to_cache(self, cache: NamedCache, key: str, value: Any) -> None:
        cache.set(key, value)

    def invalidate_local_and_broadcast(self, cache: NamedCache, key: str) -> None:
        """Remove ``key`` locally, then ask the peers to remove it too."""
        cache.remove(key)
        self._broadcast(ClusterMessage(event=cache.invalidation_event, data=key))

    def clear_all_and_broadcast(self, cache: NamedCache) -> None:
        """Purge ``cache`` locally, then ask the peers to purge it too."""
        cache.purge()
        self._broadcast(
            ClusterMessage(event=cache.invalidation_event, data=CLEAR_CACHE_MESSAGE_DATA)
        )

    def _broadcast(self, message: ClusterMessage) -> None:
        if self.cluster is None:
            return
        try:
            self.cluster.send(message)
        except Exception as e:
            logger.warning(f"Failed to broadcast {message.event.value}: {e}")

    # -------------------------------------------------------------------------
    # Cluster handlers
    # -------------------------------------------------------------------------

    def _cluster_handler(self, cache: NamedCache):
        def handle(message: ClusterMessage) -> None:
            if message.data == CLEAR_CACHE_MESSAGE_DATA:
                cache.purge()
            else:
                cache.remove(message.data)

        handle.__name__ = f"invalidate_{cache.name}"
        return handle

    def _handle_invalidate_all(self, message: ClusterMessage) -> None:
        for cache in self.caches:
            cache.purge()

    def _handle_invalidate_user(self, message: ClusterMessage) -> None:
        if message.data:
            self.user_profile_by_ids_cache.remove(message.data)

    # -------------------------------------------------------------------------
    # Whole-layer operations
    # -------------------------------------------------------------------------

    def invalidate(self) -> None:
        """Clear the reaction, emoji and user profile caches cluster-wide."""
        self.clear_all_and_broadcast(self.reaction_cache)
        self.clear_all_and_broadcast(self.emoji_cache_by_id)
        self.clear_all_and_broadcast(self.emoji_id_cache_by_name)
        self.clear_all_and_broadcast(self.user_profile_by_ids_cache)

    def invalidate_all(self) -> None:
        """Purge every cache on every node."""
        for cache in self.caches:
            cache.purge()
        self._broadcast(
            ClusterMessage(
                event=ClusterEvent.INVALIDATE_ALL_CACHES,
                data=CLEAR_CACHE_MESSAGE_DATA,
                send_type=SendType.RELIABLE,
            )
        )
        logger.info("Purged all local caches")

    async def init(self) -> None:
        await self.base.init()

    async def drop_all_tables(self) -> None:
        self.invalidate()
        await self.base.drop_all_tables()

    async def health_check(self) -> bool:
        return await self.base.health_check()

    async def close(self) -> None:
        await self.base.close()
