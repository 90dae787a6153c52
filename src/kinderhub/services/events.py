"""Class events and registrations."""

from __future__ import annotations

from kinderhub.errors import BadRequestError, NotFoundError
from kinderhub.model import Event, EventPatch, EventRegistration, Session, get_millis
from kinderhub.model.event import EVENT_UPDATABLE_FIELDS
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service


class EventService(Service):
    async def create_event(self, session: Session, class_id: str, event: Event) -> Event:
        await self.permissions.require_class(session, class_id, Permission.MANAGE_CLASS, "create_event")
        event.class_id = class_id
        return await self.store.event.save(event)

    async def get_event(self, session: Session, event_id: str) -> Event:
        event = await self.store.event.get(event_id)
        await self.permissions.require_class(session, event.class_id, Permission.VIEW_SCHOOL, "get_event")
        return event

    async def update_event(self, session: Session, event: Event) -> Event:
        stored = await self.store.event.get(event.id)
        await self.permissions.require_class(session, stored.class_id, Permission.MANAGE_CLASS, "update_event")
        stored.copy_fields(event, EVENT_UPDATABLE_FIELDS)
        return await self.store.event.update(stored)

    async def patch_event(self, session: Session, event_id: str, patch: EventPatch) -> Event:
        stored = await self.store.event.get(event_id)
        await self.permissions.require_class(session, stored.class_id, Permission.MANAGE_CLASS, "patch_event")
        stored.apply_patch(patch)
        return await self.store.event.update(stored)

    async def get_events(self, session: Session, class_id: str) -> list[Event]:
        await self.permissions.require_class(session, class_id, Permission.VIEW_SCHOOL, "get_events")
        return await self.store.event.get_by_class(class_id)

    # -------------------------------------------------------------------------
    # Registrations
    # -------------------------------------------------------------------------

    async def register_kid(self, session: Session, event_id: str, kid_id: str) -> EventRegistration:
        """Register a kid for an event.

        Kids of the event's class can register; ``is_all_class`` events are
        open to every class of the same school. Registering twice returns
        the existing registration.
        """
        event = await self.store.event.get(event_id)
        kid = await self.store.kid.get(kid_id)
        await self.permissions.require_kid(session, kid_id, Permission.MANAGE_KID, "register_kid")

        if not event.active:
            raise BadRequestError(
                code="api.event.register.inactive.app_error",
                text="The event is not active",
                where="EventService.register_kid",
                detail=f"event_id={event_id}",
            )
        if event.register_expired and get_millis() > event.register_expired:
            raise BadRequestError(
                code="api.event.register.expired.app_error",
                text="The registration for this event has closed",
                where="EventService.register_kid",
                detail=f"event_id={event_id}",
            )
        if kid.class_id != event.class_id:
            event_class = await self.store.school.get_class(event.class_id)
            kid_class = await self.store.school.get_class(kid.class_id)
            if not event.is_all_class or event_class.school_id != kid_class.school_id:
                raise BadRequestError(
                    code="api.event.register.class.app_error",
                    text="The kid cannot join an event of another class",
                    where="EventService.register_kid",
                    detail=f"event_id={event_id} kid_id={kid_id}",
                )

        try:
            return await self.store.event.get_registration(event_id, kid_id)
        except NotFoundError:
            pass
        return await self.store.event.save_registration(
            EventRegistration(event_id=event_id, kid_id=kid_id, register_by=session.user_id)
        )

    async def set_registration_paid(
        self, session: Session, event_id: str, kid_id: str, paid: bool
    ) -> EventRegistration:
        event = await self.store.event.get(event_id)
        await self.permissions.require_class(
            session, event.class_id, Permission.MANAGE_CLASS, "set_registration_paid"
        )
        registration = await self.store.event.get_registration(event_id, kid_id)
        registration.paid = paid
        return await self.store.event.update_registration(registration)

    async def get_registrations(self, session: Session, event_id: str) -> list[EventRegistration]:
        event = await self.store.event.get(event_id)
        await self.permissions.require_class(
            session, event.class_id, Permission.VIEW_SCHOOL, "get_registrations"
        )
        return await self.store.event.get_registrations(event_id)
