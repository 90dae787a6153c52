"""SQL store for schools, school members, branches and classes."""

from __future__ import annotations

from sqlalchemy import func, select

from kinderhub.model import Branch, School, SchoolClass, SchoolMember, get_millis
from kinderhub.persistence.sqlstore.base import SqlSubStore, copy_to_row, to_model, to_row
from kinderhub.persistence.tables import (
    BranchTable,
    ClassTable,
    SchoolMemberTable,
    SchoolTable,
)


class SqlSchoolStore(SqlSubStore):
    resource_type = "School"

    # -------------------------------------------------------------------------
    # Schools
    # -------------------------------------------------------------------------

    async def save(self, school: School) -> School:
        if school.id:
            raise self.existing("SqlSchoolStore.save")
        school.pre_save()
        school.is_valid()
        async with self.transaction() as session:
            session.add(to_row(SchoolTable, school))
        return school

    async def update(self, school: School) -> School:
        school.pre_update()
        school.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(session, SchoolTable, school.id, "SqlSchoolStore.update")
            school.create_at = row.create_at
            school.invite_id = row.invite_id
            copy_to_row(row, school)
        return school

    async def get(self, school_id: str) -> School:
        async with self.transaction() as session:
            row = await self._get_row(session, SchoolTable, school_id, "SqlSchoolStore.get")
            return to_model(School, row)

    async def get_by_invite_id(self, invite_id: str) -> School:
        async with self.transaction() as session:
            row = (
                await session.execute(select(SchoolTable).where(SchoolTable.invite_id == invite_id))
            ).scalar_one_or_none()
            if row is None:
                raise self.missing(invite_id, "SqlSchoolStore.get_by_invite_id")
            return to_model(School, row)

    async def get_schools_for_user(self, user_id: str) -> list[School]:
        stmt = (
            select(SchoolTable)
            .join(SchoolMemberTable, SchoolMemberTable.school_id == SchoolTable.id)
            .where(
                SchoolMemberTable.user_id == user_id,
                SchoolMemberTable.delete_at == 0,
                SchoolTable.delete_at == 0,
            )
            .order_by(SchoolTable.name)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(School, row) for row in rows]

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    async def save_member(self, member: SchoolMember) -> SchoolMember:
        member.is_valid()
        member.create_at = member.update_at = get_millis()
        async with self.transaction() as session:
            session.add(to_row(SchoolMemberTable, member))
        return member

    async def update_member(self, member: SchoolMember) -> SchoolMember:
        member.is_valid()
        member.update_at = get_millis()
        async with self.transaction() as session:
            row = await self._get_row(
                session,
                SchoolMemberTable,
                (member.school_id, member.user_id),
                "SqlSchoolStore.update_member",
            )
            member.create_at = row.create_at
            copy_to_row(row, member)
        return member

    async def get_member(self, school_id: str, user_id: str) -> SchoolMember:
        async with self.transaction() as session:
            row = await self._get_row(
                session, SchoolMemberTable, (school_id, user_id), "SqlSchoolStore.get_member"
            )
            return to_model(SchoolMember, row)

    async def get_members(self, school_id: str, offset: int = 0, limit: int = 100) -> list[SchoolMember]:
        stmt = (
            select(SchoolMemberTable)
            .where(SchoolMemberTable.school_id == school_id, SchoolMemberTable.delete_at == 0)
            .order_by(SchoolMemberTable.user_id)
            .offset(offset)
            .limit(limit)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(SchoolMember, row) for row in rows]

    async def get_active_member_count(self, school_id: str) -> int:
        stmt = select(func.count()).where(
            SchoolMemberTable.school_id == school_id, SchoolMemberTable.delete_at == 0
        )
        async with self.transaction() as session:
            return int((await session.execute(stmt)).scalar_one())

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    async def save_branch(self, branch: Branch) -> Branch:
        if branch.id:
            raise self.existing("SqlSchoolStore.save_branch")
        branch.pre_save()
        branch.is_valid()
        async with self.transaction() as session:
            session.add(to_row(BranchTable, branch))
        return branch

    async def get_branch(self, branch_id: str) -> Branch:
        async with self.transaction() as session:
            row = await self._get_row(session, BranchTable, branch_id, "SqlSchoolStore.get_branch")
            return to_model(Branch, row)

    async def get_branches(self, school_id: str) -> list[Branch]:
        stmt = (
            select(BranchTable)
            .where(BranchTable.school_id == school_id, BranchTable.delete_at == 0)
            .order_by(BranchTable.name)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(Branch, row) for row in rows]

    async def remove_branch(self, branch_id: str) -> None:
        async with self.transaction() as session:
            row = await self._get_row(session, BranchTable, branch_id, "SqlSchoolStore.remove_branch")
            row.delete_at = row.update_at = get_millis()

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    async def save_class(self, school_class: SchoolClass) -> SchoolClass:
        if school_class.id:
            raise self.existing("SqlSchoolStore.save_class")
        school_class.pre_save()
        school_class.is_valid()
        async with self.transaction() as session:
            session.add(to_row(ClassTable, school_class))
        return school_class

    async def update_class(self, school_class: SchoolClass) -> SchoolClass:
        school_class.pre_update()
        school_class.is_valid()
        async with self.transaction() as session:
            row = await self._get_row(
                session, ClassTable, school_class.id, "SqlSchoolStore.update_class"
            )
            school_class.create_at = row.create_at
            school_class.invite_id = row.invite_id
            copy_to_row(row, school_class)
        return school_class

    async def get_class(self, class_id: str) -> SchoolClass:
        async with self.transaction() as session:
            row = await self._get_row(session, ClassTable, class_id, "SqlSchoolStore.get_class")
            return to_model(SchoolClass, row)

    async def get_classes(self, school_id: str) -> list[SchoolClass]:
        stmt = (
            select(ClassTable)
            .where(ClassTable.school_id == school_id, ClassTable.delete_at == 0)
            .order_by(ClassTable.name)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(SchoolClass, row) for row in rows]

    async def get_classes_by_branch(self, branch_id: str) -> list[SchoolClass]:
        stmt = (
            select(ClassTable)
            .where(ClassTable.branch_id == branch_id, ClassTable.delete_at == 0)
            .order_by(ClassTable.name)
        )
        async with self.transaction() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_model(SchoolClass, row) for row in rows]

    async def remove_class(self, class_id: str) -> None:
        async with self.transaction() as session:
            row = await self._get_row(session, ClassTable, class_id, "SqlSchoolStore.remove_class")
            row.delete_at = row.update_at = get_millis()
