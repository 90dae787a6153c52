"""SQL store for health measurements and vaccinations."""

from __future__ import annotations

from sqlalchemy import select

from kinderhub.model import Health, Vaccine
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import HealthTable, VaccineTable


class SqlHealthStore(SqlSubStore):
    resource_type = "Health"

    async def save(self, health: Health) -> Health:
        if health.id:
            raise self.existing("SqlHealthStore.save")
        health.pre_save()
        health.is_valid()
        async with self.transaction() as session:
            session.add(to_row(HealthTable, health))
        return health

    async def update(self, health: Health) -> Health:
        health.pre_update()
        health.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, HealthTable, health.id, "SqlHealthStore.update")
            health.create_at = row.create_at
            copy_to_row(row, health)
        return health

    async def get(self, health_id: str) -> Health:
        async with self.transaction() as session:
            row = await self._get_row(session, HealthTable, health_id, "SqlHealthStore.get")
            return to_model(Health, row)

    async def get_all(self, kid_id: str) -> list[Health]:
        stmt = (
            select(HealthTable)
            .where(HealthTable.kid_id == kid_id, HealthTable.delete_at == 0)
            .order_by(HealthTable.measure_at.desc())
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Health, row) for row in rows]

    # -------------------------------------------------------------------------
    # Vaccines
    # -------------------------------------------------------------------------

    async def save_vaccine(self, vaccine: Vaccine) -> Vaccine:
        if vaccine.id:
            raise self.existing("SqlHealthStore.save_vaccine")
        vaccine.pre_save()
        vaccine.is_valid()
        async with self.transaction() as session:
            session.add(to_row(VaccineTable, vaccine))
        return vaccine

    async def get_vaccine(self, vaccine_id: str) -> Vaccine:
        async with self.transaction() as session:
            row = await self._get_row(session, VaccineTable, vaccine_id, "SqlHealthStore.get_vaccine")
            return to_model(Vaccine, row)

    async def get_vaccines(self, kid_id: str) -> list[Vaccine]:
        stmt = (
            select(VaccineTable)
            .where(VaccineTable.kid_id == kid_id, VaccineTable.delete_at == 0)
            .order_by(VaccineTable.vaccine_book_id, VaccineTable.time)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Vaccine, row) for row in rows]
