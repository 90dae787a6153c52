"""Weekly menus, schedules and the activity notes attached to them."""

from __future__ import annotations

from kinderhub.errors import BadRequestError
from kinderhub.model import (
    ActivityNote,
    ActivityType,
    Menu,
    MenuPatch,
    Schedule,
    SchedulePatch,
    Session,
)
from kinderhub.model.activity import MENU_UPDATABLE_FIELDS, SCHEDULE_UPDATABLE_FIELDS
from kinderhub.security.rbac import Permission
from kinderhub.services.base import Service


class ActivityService(Service):
    # -------------------------------------------------------------------------
    # Menus
    # -------------------------------------------------------------------------

    async def create_menu(self, session: Session, class_id: str, menu: Menu) -> Menu:
        await self.permissions.require_class(session, class_id, Permission.MANAGE_CLASS, "create_menu")
        menu.class_id = class_id
        return await self.store.menu.save(menu)

    async def get_menu(self, session: Session, menu_id: str) -> Menu:
        menu = await self.store.menu.get(menu_id)
        await self.permissions.require_class(session, menu.class_id, Permission.VIEW_SCHOOL, "get_menu")
        return menu

    async def update_menu(self, session: Session, menu: Menu) -> Menu:
        stored = await self.store.menu.get(menu.id)
        await self.permissions.require_class(session, stored.class_id, Permission.MANAGE_CLASS, "update_menu")
        stored.copy_fields(menu, MENU_UPDATABLE_FIELDS)
        return await self.store.menu.update(stored)

    async def patch_menu(self, session: Session, menu_id: str, patch: MenuPatch) -> Menu:
        stored = await self.store.menu.get(menu_id)
        await self.permissions.require_class(session, stored.class_id, Permission.MANAGE_CLASS, "patch_menu")
        stored.apply_patch(patch)
        return await self.store.menu.update(stored)

    async def get_menus(self, session: Session, class_id: str, week: int, year: int) -> list[Menu]:
        await self.permissions.require_class(session, class_id, Permission.VIEW_SCHOOL, "get_menus")
        return await self.store.menu.get_by_week(class_id, week, year)

    # -------------------------------------------------------------------------
    # Schedules
    # -------------------------------------------------------------------------

    async def create_schedule(self, session: Session, class_id: str, schedule: Schedule) -> Schedule:
        await self.permissions.require_class(session, class_id, Permission.MANAGE_CLASS, "create_schedule")
        schedule.class_id = class_id
        return await self.store.schedule.save(schedule)

    async def get_schedule(self, session: Session, schedule_id: str) -> Schedule:
        schedule = await self.store.schedule.get(schedule_id)
        await self.permissions.require_class(
            session, schedule.class_id, Permission.VIEW_SCHOOL, "get_schedule"
        )
        return schedule

    async def update_schedule(self, session: Session, schedule: Schedule) -> Schedule:
        stored = await self.store.schedule.get(schedule.id)
        await self.permissions.require_class(
            session, stored.class_id, Permission.MANAGE_CLASS, "update_schedule"
        )
        stored.copy_fields(schedule, SCHEDULE_UPDATABLE_FIELDS)
        return await self.store.schedule.update(stored)

    async def patch_schedule(self, session: Session, schedule_id: str, patch: SchedulePatch) -> Schedule:
        stored = await self.store.schedule.get(schedule_id)
        await self.permissions.require_class(
            session, stored.class_id, Permission.MANAGE_CLASS, "patch_schedule"
        )
        stored.apply_patch(patch)
        return await self.store.schedule.update(stored)

    async def get_schedules(
        self, session: Session, class_id: str, week: int, year: int, active_only: bool = False
    ) -> list[Schedule]:
        await self.permissions.require_class(session, class_id, Permission.VIEW_SCHOOL, "get_schedules")
        return await self.store.schedule.get_by_week(class_id, week, year, active_only)

    # -------------------------------------------------------------------------
    # Activity notes
    # -------------------------------------------------------------------------

    async def _activity_class_id(self, note: ActivityNote) -> str:
        """Class owning the activity a note is attached to."""
        if note.type == ActivityType.SCHEDULE:
            return (await self.store.schedule.get(note.activity_id)).class_id
        if note.type == ActivityType.MENU:
            return (await self.store.menu.get(note.activity_id)).class_id

        request = await self.store.medicine.get_request(note.activity_id)
        if request.kid_id != note.kid_id:
            raise BadRequestError(
                code="api.activity_note.kid_mismatch.app_error",
                text="The medicine request belongs to another kid",
                where="ActivityService.create_activity_note",
                detail=f"request_id={request.id} kid_id={note.kid_id}",
            )
        return (await self.store.kid.get(request.kid_id)).class_id

    async def create_activity_note(self, session: Session, note: ActivityNote) -> ActivityNote:
        """Leave a note on a kid's schedule, menu or medicine activity."""
        class_id = await self._activity_class_id(note)
        kid = await self.store.kid.get(note.kid_id)
        if kid.class_id != class_id:
            raise BadRequestError(
                code="api.activity_note.class_mismatch.app_error",
                text="The kid is not in the class of the activity",
                where="ActivityService.create_activity_note",
                detail=f"kid_id={kid.id} class_id={class_id}",
            )
        await self.permissions.require_class(session, class_id, Permission.MANAGE_CLASS, "create_activity_note")
        note.user_id = session.user_id
        return await self.store.activity_note.save(note)

    async def get_activity_notes(
        self, session: Session, kid_id: str, activity_id: str | None = None
    ) -> list[ActivityNote]:
        await self.permissions.require_kid(session, kid_id, Permission.VIEW_KID, "get_activity_notes")
        return await self.store.activity_note.get_for_kid(kid_id, activity_id)
