"""SQL stores for roles and schemes."""

from __future__ import annotations

from sqlalchemy import delete, select

from kinderhub.model import Role, Scheme, get_millis
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.store import RoleStore, SchemeStore
from kinderhub.persistence.tables import RoleTable, SchemeTable


class SqlRoleStore(SqlSubStore, RoleStore):
    resource_type = "Role"

    async def save(self, role: Role) -> Role:
        if not role.id:
            role.pre_save()
            role.is_valid()
            async with self.transaction() as session:
                session.add(to_row(RoleTable, role))
            return role

        role.pre_update()
        role.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, RoleTable, role.id, "SqlRoleStore.save")
            role.create_at = row.create_at
            copy_to_row(row, role)
        return role

    async def get(self, role_id: str) -> Role:
        async with self.transaction() as session:
            row = await self._get_row(session, RoleTable, role_id, "SqlRoleStore.get")
            return to_model(Role, row)

    async def get_all(self) -> list[Role]:
        async with self.transaction() as session:
            rows = (await session.execute(select(RoleTable).order_by(RoleTable.name))).scalars().all()
            return [to_model(Role, row) for row in rows]

    async def get_by_name(self, name: str) -> Role:
        async with self.transaction() as session:
            row = (
                await session.execute(select(RoleTable).where(RoleTable.name == name))
            ).scalar_one_or_none()
            if row is None:
                raise self.missing(name, "SqlRoleStore.get_by_name")
            return to_model(Role, row)

    async def get_by_names(self, names: list[str]) -> list[Role]:
        if not names:
            return []
        stmt = select(RoleTable).where(RoleTable.name.in_(names)).order_by(RoleTable.name)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Role, row) for row in rows]

    async def delete(self, role_id: str) -> Role:
        async with self.transaction() as session:
            row = await self._get_row(session, RoleTable, role_id, "SqlRoleStore.delete")
            row.delete_at = row.update_at = get_millis()
            return to_model(Role, row)

    async def permanent_delete_all(self) -> None:
        async with self.transaction() as session:
            await session.execute(delete(RoleTable))


class SqlSchemeStore(SqlSubStore, SchemeStore):
    resource_type = "Scheme"

    async def save(self, scheme: Scheme) -> Scheme:
        if not scheme.id:
            scheme.pre_save()
            scheme.is_valid()
            async with self.transaction() as session:
                session.add(to_row(SchemeTable, scheme))
            return scheme

        scheme.pre_update()
        scheme.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, SchemeTable, scheme.id, "SqlSchemeStore.save")
            scheme.create_at = row.create_at
            copy_to_row(row, scheme)
        return scheme

    async def get(self, scheme_id: str) -> Scheme:
        async with self.transaction() as session:
            row = await self._get_row(session, SchemeTable, scheme_id, "SqlSchemeStore.get")
            return to_model(Scheme, row)

    async def get_by_name(self, name: str) -> Scheme:
        async with self.transaction() as session:
            row = (
                await session.execute(select(SchemeTable).where(SchemeTable.name == name))
            ).scalar_one_or_none()
            if row is None:
                raise self.missing(name, "SqlSchemeStore.get_by_name")
            return to_model(Scheme, row)

    async def get_all_page(self, scope: str, offset: int, limit: int) -> list[Scheme]:
        stmt = select(SchemeTable).where(SchemeTable.delete_at == 0)
        if scope:
            stmt = stmt.where(SchemeTable.scope == scope)
        stmt = stmt.order_by(SchemeTable.create_at).offset(offset).limit(limit)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Scheme, row) for row in rows]

    async def delete(self, scheme_id: str) -> Scheme:
        async with self.transaction() as session:
            row = await self._get_row(session, SchemeTable, scheme_id, "SqlSchemeStore.delete")
            row.delete_at = row.update_at = get_millis()
            return to_model(Scheme, row)

    async def permanent_delete_all(self) -> None:
        async with self.transaction() as session:
            await session.execute(delete(SchemeTable))
