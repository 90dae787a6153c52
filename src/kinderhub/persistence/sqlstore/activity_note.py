"""SQL store for the notes teachers leave on a kid's activities."""

from __future__ import annotations

from sqlalchemy import select

from kinderhub.model import ActivityNote
from kinderhub.persistence.sqlstore.base import SqlSubStore, to_model, to_row
from kinderhub.persistence.tables import ActivityNoteTable


class SqlActivityNoteStore(SqlSubStore):
    resource_type = "ActivityNote"

    async def save(self, note: ActivityNote) -> ActivityNote:
        if note.id:
            raise self.existing("SqlActivityNoteStore.save")
        note.pre_save()
        note.is_valid()
        async with self.transaction() as session:
            session.add(to_row(ActivityNoteTable, note))
        return note

    async def get(self, note_id: str) -> ActivityNote:
        async with self.transaction() as session:
            row = await self._get_row(session, ActivityNoteTable, note_id, "SqlActivityNoteStore.get")
            return to_model(ActivityNote, row)

    async def get_for_kid(self, kid_id: str, activity_id: str | None = None) -> list[ActivityNote]:
        stmt = select(ActivityNoteTable).where(
            ActivityNoteTable.kid_id == kid_id, ActivityNoteTable.delete_at == 0
        )
        if activity_id:
            stmt = stmt.where(ActivityNoteTable.activity_id == activity_id)
        stmt = stmt.order_by(ActivityNoteTable.create_at)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(ActivityNote, row) for row in rows]
