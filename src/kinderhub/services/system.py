"""System administration operations."""

from __future__ import annotations

import logging

from kinderhub.cache.layer import LocalCacheLayer
from kinderhub.model import Session
from kinderhub.persistence.store import Store
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service
from kinderhub.services.permissions import PermissionService

logger = logging.getLogger(__name__)


class SystemService(Service):
    def __init__(
        self,
        store: Store,
        permissions: PermissionService,
        cache_layer: LocalCacheLayer | None = None,
    ):
        super().__init__(store, permissions)
        self.cache_layer = cache_layer

    async def invalidate_all_caches(self, session: Session) -> None:
        """Purge the local caches of every node in the cluster."""
        await self.permissions.require(session, Permission.MANAGE_SYSTEM, "invalidate_all_caches")
        if self.cache_layer is None:
            logger.info("No cache layer configured, nothing to invalidate")
            return
        self.cache_layer.invalidate_all()

    async def health_check(self) -> bool:
        return await self.store.health_check()
