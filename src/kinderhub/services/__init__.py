"""Application services.

``App`` wires the store (usually the ``LocalCacheLayer`` around the SQL
store), the permission checks and one service object per area together.
"""

from __future__ import annotations

from kinderhub.cache.layer import LocalCacheLayer
from kinderhub.persistence.store import Store
from kinderhub.services.activities import ActivityService
from kinderhub.services.emoji import EmojiService
from kinderhub.services.events import EventService
from kinderhub.services.health import HealthService
from kinderhub.services.kids import KidService
from kinderhub.services.medicine import MedicineService
from kinderhub.services.permissions import PermissionService
from kinderhub.services.roles import RoleService, seed_default_roles
from kinderhub.services.schools import SchoolService
from kinderhub.services.system import SystemService
from kinderhub.services.users import UserService


class App:
    def __init__(self, store: Store, cache_layer: LocalCacheLayer | None = None):
        self.store = store
        self.cache_layer = cache_layer
        self.permissions = PermissionService(store)

        self.schools = SchoolService(store, self.permissions)
        self.kids = KidService(store, self.permissions)
        self.health = HealthService(store, self.permissions)
        self.medicine = MedicineService(store, self.permissions)
        self.activities = ActivityService(store, self.permissions)
        self.events = EventService(store, self.permissions)
        self.roles = RoleService(store, self.permissions)
        self.emoji = EmojiService(store, self.permissions)
        self.users = UserService(store, self.permissions)
        self.system = SystemService(store, self.permissions, cache_layer)

    async def seed(self) -> int:
        return await seed_default_roles(self.store)


__all__ = [
    "App",
    "PermissionService",
    "seed_default_roles",
]
