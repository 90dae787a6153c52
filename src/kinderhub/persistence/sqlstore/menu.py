"""SQL store for weekly class menus."""

from __future__ import annotations

from sqlalchemy import select

from kinderhub.model import Menu
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import MenuTable


class SqlMenuStore(SqlSubStore):
    resource_type = "Menu"

    async def save(self, menu: Menu) -> Menu:
        if menu.id:
            raise self.existing("SqlMenuStore.save")
        menu.pre_save()
        menu.is_valid()
        async with self.transaction() as session:
            session.add(to_row(MenuTable, menu))
        return menu

    async def update(self, menu: Menu) -> Menu:
        menu.pre_update()
        menu.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, MenuTable, menu.id, "SqlMenuStore.update")
            menu.create_at = row.create_at
            copy_to_row(row, menu)
        return menu

    async def get(self, menu_id: str) -> Menu:
        async with self.transaction() as session:
            row = await self._get_row(session, MenuTable, menu_id, "SqlMenuStore.get")
            return to_model(Menu, row)

    async def get_by_week(self, class_id: str, week: int, year: int) -> list[Menu]:
        stmt = (
            select(MenuTable)
            .where(
                MenuTable.class_id == class_id,
                MenuTable.week == week,
                MenuTable.year == year,
                MenuTable.delete_at == 0,
            )
            .order_by(MenuTable.week_day, MenuTable.start_time)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Menu, row) for row in rows]
