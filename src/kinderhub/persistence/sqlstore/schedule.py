"""SQL store for weekly class schedules."""

from __future__ import annotations

from sqlalchemy import select

from kinderhub.model import Schedule
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import ScheduleTable


class SqlScheduleStore(SqlSubStore):
    resource_type = "Schedule"

    async def save(self, schedule: Schedule) -> Schedule:
        if schedule.id:
            raise self.existing("SqlScheduleStore.save")
        schedule.pre_save()
        schedule.is_valid()
        async with self.transaction() as session:
            session.add(to_row(ScheduleTable, schedule))
        return schedule

    async def update(self, schedule: Schedule) -> Schedule:
        schedule.pre_update()
        schedule.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, ScheduleTable, schedule.id, "SqlScheduleStore.update")
            schedule.create_at = row.create_at
            copy_to_row(row, schedule)
        return schedule

    async def get(self, schedule_id: str) -> Schedule:
        async with self.transaction() as session:
            row = await self._get_row(session, ScheduleTable, schedule_id, "SqlScheduleStore.get")
            return to_model(Schedule, row)

    async def get_by_week(
        self, class_id: str, week: int, year: int, active_only: bool = False
    ) -> list[Schedule]:
        stmt = select(ScheduleTable).where(
            ScheduleTable.class_id == class_id,
            ScheduleTable.week == week,
            ScheduleTable.year == year,
            ScheduleTable.delete_at == 0,
        )
        if active_only:
            stmt = stmt.where(ScheduleTable.active.is_(True))
        stmt = stmt.order_by(ScheduleTable.week_day, ScheduleTable.start_time)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Schedule, row) for row in rows]
