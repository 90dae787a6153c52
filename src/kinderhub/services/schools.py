"""School, branch and class operations."""

from __future__ import annotations

import logging

from kinderhub.errors import BadRequestError, NotFoundError
from kinderhub.model import (
    Branch,
    ClassPatch,
    School,
    SchoolClass,
    SchoolMember,
    SchoolPatch,
    Session,
)
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service

logger = logging.getLogger(__name__)

# Fields a school update copies onto the stored school
SCHOOL_UPDATABLE_FIELDS = ("name", "description", "contact_name", "phone", "address")
CLASS_UPDATABLE_FIELDS = ("name", "description", "branch_id")


class SchoolService(Service):
    # -------------------------------------------------------------------------
    # Schools
    # -------------------------------------------------------------------------

    async def create_school(self, session: Session, school: School) -> School:
        """Create a school and join the creator as its administrator."""
        await self.permissions.require(session, Permission.CREATE_SCHOOL, "create_school")

        user = None
        if not session.is_anonymous:
            user = await self.store.user.get(session.user_id)
            school.email = user.email

        created = await self.store.school.save(school)

        if user is not None:
            await self.store.school.save_member(
                SchoolMember(school_id=created.id, user_id=user.id, scheme_admin=True)
            )
        logger.info(f"Created school {created.id}")
        return created

    async def _sanitize(self, session: Session, school: School) -> School:
        if not await self.permissions.has_school_permission(
            session, school.id, Permission.MANAGE_SCHOOL
        ):
            school.sanitize()
        return school

    async def get_school(self, session: Session, school_id: str) -> School:
        await self.permissions.require_school(session, school_id, Permission.VIEW_SCHOOL, "get_school")
        return await self._sanitize(session, await self.store.school.get(school_id))

    async def update_school(self, session: Session, school: School) -> School:
        await self.permissions.require_school(
            session, school.id, Permission.MANAGE_SCHOOL, "update_school"
        )
        stored = await self.store.school.get(school.id)
        stored.copy_fields(school, SCHOOL_UPDATABLE_FIELDS)
        return await self.store.school.update(stored)

    async def patch_school(self, session: Session, school_id: str, patch: SchoolPatch) -> School:
        await self.permissions.require_school(
            session, school_id, Permission.MANAGE_SCHOOL, "patch_school"
        )
        stored = await self.store.school.get(school_id)
        stored.apply_patch(patch)
        return await self.store.school.update(stored)

    async def get_schools_for_user(self, session: Session, user_id: str) -> list[School]:
        await self.require_self_or(
            session, user_id, Permission.EDIT_OTHER_USERS, "get_schools_for_user"
        )
        schools = await self.store.school.get_schools_for_user(user_id)
        return [await self._sanitize(session, school) for school in schools]

    async def get_members(self, session: Session, school_id: str) -> list[SchoolMember]:
        await self.permissions.require_school(
            session, school_id, Permission.VIEW_SCHOOL, "get_school_members"
        )
        return await self.store.school.get_members(school_id)

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    async def add_branch(self, session: Session, school_id: str, branch: Branch) -> Branch:
        await self.permissions.require_school(session, school_id, Permission.MANAGE_SCHOOL, "add_branch")
        await self.store.school.get(school_id)
        branch.school_id = school_id
        branch.creator_id = session.user_id
        return await self.store.school.save_branch(branch)

    async def get_branch(self, session: Session, school_id: str, branch_id: str) -> Branch:
        branch = await self.store.school.get_branch(branch_id)
        if branch.school_id != school_id:
            raise NotFoundError("Branch", branch_id, where="get_branch")
        await self.permissions.require_school(
            session, branch.school_id, Permission.VIEW_SCHOOL, "get_branch"
        )
        return branch

    async def get_branches(self, session: Session, school_id: str) -> list[Branch]:
        await self.permissions.require_school(session, school_id, Permission.VIEW_SCHOOL, "get_branches")
        return await self.store.school.get_branches(school_id)

    async def remove_branch(self, session: Session, school_id: str, branch_id: str) -> None:
        branch = await self.store.school.get_branch(branch_id)
        if branch.school_id != school_id:
            raise NotFoundError("Branch", branch_id, where="remove_branch")
        await self.permissions.require_school(
            session, branch.school_id, Permission.MANAGE_SCHOOL, "remove_branch"
        )
        await self.store.school.remove_branch(branch_id)

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    async def _check_branch(self, school_id: str, branch_id: str) -> None:
        if not branch_id:
            return
        try:
            branch = await self.store.school.get_branch(branch_id)
        except NotFoundError:
            branch = None
        if branch is None or branch.school_id != school_id:
            raise BadRequestError(
                code="api.class.invalid_branch.app_error",
                text="The branch does not belong to the school",
                where="SchoolService._check_branch",
                detail=f"branch_id={branch_id}",
            )

    async def add_class(self, session: Session, school_id: str, school_class: SchoolClass) -> SchoolClass:
        await self.permissions.require_school(session, school_id, Permission.MANAGE_SCHOOL, "add_class")
        await self.store.school.get(school_id)
        await self._check_branch(school_id, school_class.branch_id)
        school_class.school_id = school_id
        school_class.creator_id = session.user_id
        return await self.store.school.save_class(school_class)

    async def get_class(self, session: Session, class_id: str) -> SchoolClass:
        school_class = await self.store.school.get_class(class_id)
        await self.permissions.require_school(
            session, school_class.school_id, Permission.VIEW_SCHOOL, "get_class"
        )
        if not await self.permissions.has_school_permission(
            session, school_class.school_id, Permission.MANAGE_SCHOOL
        ):
            school_class.sanitize()
        return school_class

    async def get_classes(self, session: Session, school_id: str) -> list[SchoolClass]:
        await self.permissions.require_school(session, school_id, Permission.VIEW_SCHOOL, "get_classes")
        classes = await self.store.school.get_classes(school_id)
        if not await self.permissions.has_school_permission(
            session, school_id, Permission.MANAGE_SCHOOL
        ):
            for school_class in classes:
                school_class.sanitize()
        return classes

    async def get_classes_by_branch(self, session: Session, school_id: str, branch_id: str) -> list[SchoolClass]:
        await self.get_branch(session, school_id, branch_id)
        return await self.store.school.get_classes_by_branch(branch_id)

    async def update_class(self, session: Session, school_class: SchoolClass) -> SchoolClass:
        stored = await self.store.school.get_class(school_class.id)
        await self.permissions.require_school(
            session, stored.school_id, Permission.MANAGE_SCHOOL, "update_class"
        )
        stored.copy_fields(school_class, CLASS_UPDATABLE_FIELDS)
        await self._check_branch(stored.school_id, stored.branch_id)
        return await self.store.school.update_class(stored)

    async def patch_class(self, session: Session, class_id: str, patch: ClassPatch) -> SchoolClass:
        stored = await self.store.school.get_class(class_id)
        await self.permissions.require_school(
            session, stored.school_id, Permission.MANAGE_SCHOOL, "patch_class"
        )
        stored.apply_patch(patch)
        await self._check_branch(stored.school_id, stored.branch_id)
        return await self.store.school.update_class(stored)

    async def remove_class(self, session: Session, school_id: str, class_id: str) -> None:
        school_class = await self.store.school.get_class(class_id)
        school_class.ensure_belongs_to_school(school_id)
        await self.permissions.require_school(
            session, school_class.school_id, Permission.MANAGE_SCHOOL, "remove_class"
        )
        await self.store.school.remove_class(class_id)
