"""SQL store for kids and their guardians."""

from __future__ import annotations

from sqlalchemy import func, select

from kinderhub.model import Kid, KidGuardian, get_millis
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import KidGuardianTable, KidTable


class SqlKidStore(SqlSubStore):
    resource_type = "Kid"

    async def save(self, kid: Kid) -> Kid:
        if kid.id:
            raise self.existing("SqlKidStore.save")
        kid.pre_save()
        kid.is_valid()
        async with self.transaction() as session:
            session.add(to_row(KidTable, kid))
        return kid

    async def update(self, kid: Kid) -> Kid:
        kid.pre_update()
        kid.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, KidTable, kid.id, "SqlKidStore.update")
            kid.create_at = row.create_at
            copy_to_row(row, kid)
        return kid

    async def get(self, kid_id: str) -> Kid:
        async with self.transaction() as session:
            row = await self._get_row(session, KidTable, kid_id, "SqlKidStore.get")
            return to_model(Kid, row)

    async def get_kids_for_user(self, user_id: str) -> list[Kid]:
        stmt = (
            select(KidTable)
            .join(KidGuardianTable, KidGuardianTable.kid_id == KidTable.id)
            .where(
                KidGuardianTable.user_id == user_id,
                KidGuardianTable.delete_at == 0,
                KidTable.delete_at == 0,
            )
            .order_by(KidTable.first_name)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Kid, row) for row in rows]

    async def get_kids_by_class(self, class_id: str) -> list[Kid]:
        stmt = (
            select(KidTable)
            .where(KidTable.class_id == class_id, KidTable.delete_at == 0)
            .order_by(KidTable.first_name)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Kid, row) for row in rows]

    # -------------------------------------------------------------------------
    # Guardians
    # -------------------------------------------------------------------------

    async def save_guardian(self, guardian: KidGuardian) -> KidGuardian:
        guardian.is_valid()
        guardian.create_at = guardian.update_at = get_millis()
        async with self.transaction() as session:
            session.add(to_row(KidGuardianTable, guardian))
        return guardian

    async def update_guardian(self, guardian: KidGuardian) -> KidGuardian:
        guardian.is_valid()
        guardian.update_at = get_millis()
        async with self.transaction() as session:
            row = await self._get_row(
                session,
                KidGuardianTable,
                (guardian.kid_id, guardian.user_id),
                "SqlKidStore.update_guardian",
            )
            guardian.create_at = row.create_at
            copy_to_row(row, guardian)
        return guardian

    async def get_guardian(self, kid_id: str, user_id: str) -> KidGuardian:
        async with self.transaction() as session:
            row = await self._get_row(
                session, KidGuardianTable, (kid_id, user_id), "SqlKidStore.get_guardian"
            )
            return to_model(KidGuardian, row)

    async def get_guardians(self, kid_id: str) -> list[KidGuardian]:
        stmt = (
            select(KidGuardianTable)
            .where(KidGuardianTable.kid_id == kid_id, KidGuardianTable.delete_at == 0)
            .order_by(KidGuardianTable.create_at)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(KidGuardian, row) for row in rows]

    async def get_active_guardian_count(self, kid_id: str) -> int:
        stmt = select(func.count()).where(
            KidGuardianTable.kid_id == kid_id, KidGuardianTable.delete_at == 0
        )
        async with self.transaction() as session:
            return int((await session.execute(stmt)).scalar_one())
