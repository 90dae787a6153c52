"""SQL store for medicine requests and the medicines they list."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kinderhub.model import Medicine, MedicineRequest
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import KidTable, MedicineRequestTable, MedicineTable


class SqlMedicineStore(SqlSubStore):
    resource_type = "MedicineRequest"

    async def save_request(self, request: MedicineRequest) -> MedicineRequest:
        """Insert a request together with its medicines."""
        if request.id:
            raise self.existing("SqlMedicineStore.save_request")
        request.pre_save()
        for medicine in request.medicines:
            medicine.request_id = request.id
            medicine.pre_save()
        request.is_valid()
        for medicine in request.medicines:
            medicine.is_valid()

        async with self.transaction() as session:
            session.add(to_row(MedicineRequestTable, request))
            session.add_all([to_row(MedicineTable, medicine) for medicine in request.medicines])
        return request

    async def update_request(self, request: MedicineRequest) -> MedicineRequest:
        request.pre_update()
        request.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(
                session, MedicineRequestTable, request.id, "SqlMedicineStore.update_request"
            )
            request.create_at = row.create_at
            copy_to_row(row, request)
            request.medicines = await self._load_medicines(session, request.id)
        return request

    async def get_request(self, request_id: str) -> MedicineRequest:
        async with self.transaction() as session:
            row = await self._get_row(
                session, MedicineRequestTable, request_id, "SqlMedicineStore.get_request"
            )
            request = to_model(MedicineRequest, row)
            request.medicines = await self._load_medicines(session, request_id)
            return request

    async def get_requests_by_kid(self, kid_id: str) -> list[MedicineRequest]:
        stmt = (
            select(MedicineRequestTable)
            .where(MedicineRequestTable.kid_id == kid_id, MedicineRequestTable.delete_at == 0)
            .order_by(MedicineRequestTable.from_date.desc())
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(MedicineRequest, row) for row in rows]

    async def get_requests_by_class(self, class_id: str, from_date: int, to_date: int) -> list[MedicineRequest]:
        """Requests of the kids of a class overlapping ``[from_date, to_date]``."""
        stmt = (
            select(MedicineRequestTable)
            .join(KidTable, KidTable.id == MedicineRequestTable.kid_id)
            .where(
                KidTable.class_id == class_id,
                MedicineRequestTable.delete_at == 0,
                MedicineRequestTable.from_date <= to_date,
                MedicineRequestTable.to_date >= from_date,
            )
            .order_by(MedicineRequestTable.from_date)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(MedicineRequest, row) for row in rows]

    # -------------------------------------------------------------------------
    # Medicines
    # -------------------------------------------------------------------------

    async def save_medicine(self, medicine: Medicine) -> Medicine:
        if medicine.id:
            raise self.existing("SqlMedicineStore.save_medicine")
        medicine.pre_save()
        medicine.is_valid()
        async with self.transaction() as session:
            await self._get_row(
                session, MedicineRequestTable, medicine.request_id, "SqlMedicineStore.save_medicine"
            )
            session.add(to_row(MedicineTable, medicine))
        return medicine

    async def get_medicines_by_request(self, request_id: str) -> list[Medicine]:
        async with self.transaction() as session:
            return await self._load_medicines(session, request_id)

    async def _load_medicines(self, session: AsyncSession, request_id: str) -> list[Medicine]:
        stmt = (
            select(MedicineTable)
            .where(MedicineTable.request_id == request_id)
            .order_by(MedicineTable.create_at, MedicineTable.id)
        )
        rows = (await session.execute(stmt)).scalars().all()
        return [to_model(Medicine, row) for row in rows]
