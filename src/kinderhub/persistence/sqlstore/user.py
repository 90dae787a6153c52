"""SQL store for users."""

from __future__ import annotations

from sqlalchemy import select, update

from kinderhub.model import User, get_millis
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.store import UserStore
from kinderhub.persistence.tables import UserTable


class SqlUserStore(SqlSubStore, UserStore):
    resource_type = "User"

    async def save(self, user: User) -> User:
        if user.id:
            raise self.existing("SqlUserStore.save")
        user.pre_save()
        user.is_valid()
        async with self.transaction() as session:
            session.add(to_row(UserTable, user))
        return user

    async def update(self, user: User) -> User:
        """Update the profile fields of a user; roles are kept as stored."""
        user.pre_update()
        user.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, UserTable, user.id, "SqlUserStore.update")
            user.create_at = row.create_at
            user.roles = row.roles
            copy_to_row(row, user)
        return user

    async def get(self, user_id: str) -> User:
        async with self.transaction() as session:
            row = await self._get_row(session, UserTable, user_id, "SqlUserStore.get")
            return to_model(User, row)

    async def get_by_username(self, username: str) -> User:
        stmt = select(UserTable).where(UserTable.username == username.lower())
        async with self.transaction() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                raise self.missing(username, "SqlUserStore.get_by_username")
            return to_model(User, row)

    async def get_profile_by_ids(self, user_ids: list[str], allow_from_cache: bool) -> list[User]:
        if not user_ids:
            return []
        stmt = select(UserTable).where(UserTable.id.in_(user_ids)).order_by(UserTable.username)
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(User, row) for row in rows]

    async def update_update_at(self, user_id: str) -> int:
        now = get_millis()
        async with self.transaction() as session:
            result = await session.execute(
                update(UserTable).where(UserTable.id == user_id).values(update_at=now)
            )
            if result.rowcount == 0:
                raise self.missing(user_id, "SqlUserStore.update_update_at")
        return now

    def invalidate_profile_cache_for_user(self, user_id: str) -> None:
        pass

    def clear_caches(self) -> None:
        pass
