"""Medicine requests."""

from __future__ import annotations

from kinderhub.model import MedicineRequest, MedicineRequestPatch, Session
from kinderhub.model.medicine import MEDICINE_REQUEST_UPDATABLE_FIELDS
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service


class MedicineService(Service):
    async def create_request(self, session: Session, request: MedicineRequest) -> MedicineRequest:
        """Hand in a medicine request together with its medicines."""
        await self.permissions.require_kid(
            session, request.kid_id, Permission.MANAGE_KID, "create_medicine_request"
        )
        await self.store.kid.get(request.kid_id)
        request.create_by = session.user_id
        request.confirmed = False
        request.confirm_by = ""
        return await self.store.medicine.save_request(request)

    async def get_request(self, session: Session, request_id: str) -> MedicineRequest:
        request = await self.store.medicine.get_request(request_id)
        await self.permissions.require_kid(
            session, request.kid_id, Permission.VIEW_KID, "get_medicine_request"
        )
        return request

    async def _update(self, session: Session, stored: MedicineRequest, was_confirmed: bool) -> MedicineRequest:
        if stored.confirmed and not was_confirmed:
            stored.confirm_by = session.user_id
        return await self.store.medicine.update_request(stored)

    async def update_request(self, session: Session, request: MedicineRequest) -> MedicineRequest:
        stored = await self.store.medicine.get_request(request.id)
        await self.permissions.require_kid(
            session, stored.kid_id, Permission.MANAGE_KID, "update_medicine_request"
        )
        was_confirmed = stored.confirmed
        stored.copy_fields(request, MEDICINE_REQUEST_UPDATABLE_FIELDS)
        return await self._update(session, stored, was_confirmed)

    async def patch_request(
        self, session: Session, request_id: str, patch: MedicineRequestPatch
    ) -> MedicineRequest:
        stored = await self.store.medicine.get_request(request_id)
        await self.permissions.require_kid(
            session, stored.kid_id, Permission.MANAGE_KID, "patch_medicine_request"
        )
        was_confirmed = stored.confirmed
        stored.apply_patch(patch)
        return await self._update(session, stored, was_confirmed)

    async def get_requests_by_kid(self, session: Session, kid_id: str) -> list[MedicineRequest]:
        await self.permissions.require_kid(session, kid_id, Permission.VIEW_KID, "get_medicine_requests")
        return await self.store.medicine.get_requests_by_kid(kid_id)

    async def get_requests_by_class(
        self, session: Session, class_id: str, from_date: int, to_date: int
    ) -> list[MedicineRequest]:
        await self.permissions.require_class(
            session, class_id, Permission.VIEW_KID, "get_medicine_requests_by_class"
        )
        return await self.store.medicine.get_requests_by_class(class_id, from_date, to_date)
