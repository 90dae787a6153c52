"""Health measurements and vaccinations."""

from __future__ import annotations

from kinderhub.model import VACCINE_BOOK, Health, HealthPatch, Session, Vaccine, VaccineBook
from kinderhub.model.health import HEALTH_UPDATABLE_FIELDS
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service


class HealthService(Service):
    async def create_health(self, session: Session, health: Health) -> Health:
        await self.permissions.require_kid(session, health.kid_id, Permission.MANAGE_KID, "create_health")
        await self.store.kid.get(health.kid_id)
        return await self.store.health.save(health)

    async def get_health(self, session: Session, health_id: str) -> Health:
        health = await self.store.health.get(health_id)
        await self.permissions.require_kid(session, health.kid_id, Permission.VIEW_KID, "get_health")
        return health

    async def update_health(self, session: Session, health: Health) -> Health:
        stored = await self.store.health.get(health.id)
        await self.permissions.require_kid(session, stored.kid_id, Permission.MANAGE_KID, "update_health")
        stored.copy_fields(health, HEALTH_UPDATABLE_FIELDS)
        return await self.store.health.update(stored)

    async def patch_health(self, session: Session, health_id: str, patch: HealthPatch) -> Health:
        stored = await self.store.health.get(health_id)
        await self.permissions.require_kid(session, stored.kid_id, Permission.MANAGE_KID, "patch_health")
        stored.apply_patch(patch)
        return await self.store.health.update(stored)

    async def get_healths(self, session: Session, kid_id: str) -> list[Health]:
        await self.permissions.require_kid(session, kid_id, Permission.VIEW_KID, "get_healths")
        return await self.store.health.get_all(kid_id)

    # -------------------------------------------------------------------------
    # Vaccines
    # -------------------------------------------------------------------------

    async def create_vaccine(self, session: Session, vaccine: Vaccine) -> Vaccine:
        await self.permissions.require_kid(session, vaccine.kid_id, Permission.MANAGE_KID, "create_vaccine")
        await self.store.kid.get(vaccine.kid_id)
        return await self.store.health.save_vaccine(vaccine)

    async def get_vaccines(self, session: Session, kid_id: str) -> list[Vaccine]:
        await self.permissions.require_kid(session, kid_id, Permission.VIEW_KID, "get_vaccines")
        return await self.store.health.get_vaccines(kid_id)

    def get_vaccine_book(self) -> list[VaccineBook]:
        return list(VACCINE_BOOK)
