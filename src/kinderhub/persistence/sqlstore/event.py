"""SQL store for class events and event registrations."""

from __future__ import annotations

from sqlalchemy import select

from kinderhub.model import Event, EventRegistration
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import EventRegistrationTable, EventTable


class SqlEventStore(SqlSubStore):
    resource_type = "Event"

    async def save(self, event: Event) -> Event:
        if event.id:
            raise self.existing("SqlEventStore.save")
        event.pre_save()
        event.is_valid()
        async with self.transaction() as session:
            session.add(to_row(EventTable, event))
        return event

    async def update(self, event: Event) -> Event:
        event.pre_update()
        event.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, EventTable, event.id, "SqlEventStore.update")
            event.create_at = row.create_at
            copy_to_row(row, event)
        return event

    async def get(self, event_id: str) -> Event:
        async with self.transaction() as session:
            row = await self._get_row(session, EventTable, event_id, "SqlEventStore.get")
            return to_model(Event, row)

    async def get_by_class(self, class_id: str) -> list[Event]:
        stmt = (
            select(EventTable)
            .where(EventTable.class_id == class_id, EventTable.delete_at == 0)
            .order_by(EventTable.start_time)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Event, row) for row in rows]

    # -------------------------------------------------------------------------
    # Registrations
    # -------------------------------------------------------------------------

    async def save_registration(self, registration: EventRegistration) -> EventRegistration:
        if registration.id:
            raise self.existing("SqlEventStore.save_registration")
        registration.pre_save()
        registration.is_valid()
        async with self.transaction() as session:
            session.add(to_row(EventRegistrationTable, registration))
        return registration

    async def update_registration(self, registration: EventRegistration) -> EventRegistration:
        registration.pre_update()
        registration.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(
                session,
                EventRegistrationTable,
                registration.id,
                "SqlEventStore.update_registration",
            )
            registration.create_at = row.create_at
            copy_to_row(row, registration)
        return registration

    async def get_registration(self, event_id: str, kid_id: str) -> EventRegistration:
        stmt = select(EventRegistrationTable).where(
            EventRegistrationTable.event_id == event_id,
            EventRegistrationTable.kid_id == kid_id,
        )
        async with self.transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                raise self.missing(f"{event_id}/{kid_id}", "SqlEventStore.get_registration")
            return to_model(EventRegistration, row)

    async def get_registrations(self, event_id: str) -> list[EventRegistration]:
        stmt = (
            select(EventRegistrationTable)
            .where(
                EventRegistrationTable.event_id == event_id,
                EventRegistrationTable.delete_at == 0,
            )
            .order_by(EventRegistrationTable.create_at)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(EventRegistration, row) for row in rows]
