"""Menu, schedule and activity note endpoints.

- POST /api/v4/classes/{class_id}/menus          - Create menu
- GET  /api/v4/classes/{class_id}/menus          - Menus of a week
- GET  /api/v4/menus/{menu_id}                   - Get menu
- PUT  /api/v4/menus/{menu_id}                   - Update menu
- PUT  /api/v4/menus/{menu_id}/patch             - Patch menu
- POST /api/v4/classes/{class_id}/schedules      - Create schedule
- GET  /api/v4/classes/{class_id}/schedules      - Schedules of a week
- GET  /api/v4/schedules/{schedule_id}           - Get schedule
- PUT  /api/v4/schedules/{schedule_id}           - Update schedule
- PUT  /api/v4/schedules/{schedule_id}/patch     - Patch schedule
- POST /api/v4/activity_notes                    - Leave a note on an activity
- GET  /api/v4/kids/{kid_id}/activity_notes      - Notes of a kid
"""

from __future__ import annotations

from fastapi import APIRouter

from kinderhub.api.deps import AppDep, SessionDep, require_matching_id
from kinderhub.model import ActivityNote, Menu, MenuPatch, Schedule, SchedulePatch

router = APIRouter(prefix="/api/v4", tags=["activities"])


# =============================================================================
# Menus
# =============================================================================


@router.post("/classes/{class_id}/menus", status_code=201)
async def create_menu(class_id: str, menu: Menu, app: AppDep, session: SessionDep) -> Menu:
    return await app.activities.create_menu(session, class_id, menu)


@router.get("/classes/{class_id}/menus")
async def get_menus(
    class_id: str, week: int, year: int, app: AppDep, session: SessionDep
) -> list[Menu]:
    return await app.activities.get_menus(session, class_id, week, year)


@router.get("/menus/{menu_id}")
async def get_menu(menu_id: str, app: AppDep, session: SessionDep) -> Menu:
    return await app.activities.get_menu(session, menu_id)


@router.put("/menus/{menu_id}")
async def update_menu(menu_id: str, menu: Menu, app: AppDep, session: SessionDep) -> Menu:
    require_matching_id(menu_id, menu.id, "menu id")
    return await app.activities.update_menu(session, menu)


@router.put("/menus/{menu_id}/patch")
async def patch_menu(menu_id: str, patch: MenuPatch, app: AppDep, session: SessionDep) -> Menu:
    return await app.activities.patch_menu(session, menu_id, patch)


# =============================================================================
# Schedules
# =============================================================================


@router.post("/classes/{class_id}/schedules", status_code=201)
async def create_schedule(
    class_id: str, schedule: Schedule, app: AppDep, session: SessionDep
) -> Schedule:
    return await app.activities.create_schedule(session, class_id, schedule)


@router.get("/classes/{class_id}/schedules")
async def get_schedules(
    class_id: str,
    week: int,
    year: int,
    app: AppDep,
    session: SessionDep,
    active_only: bool = False,
) -> list[Schedule]:
    return await app.activities.get_schedules(session, class_id, week, year, active_only)


@router.get("/schedules/{schedule_id}")
async def get_schedule(schedule_id: str, app: AppDep, session: SessionDep) -> Schedule:
    return await app.activities.get_schedule(session, schedule_id)


@router.put("/schedules/{schedule_id}")
async def update_schedule(
    schedule_id: str, schedule: Schedule, app: AppDep, session: SessionDep
) -> Schedule:
    require_matching_id(schedule_id, schedule.id, "schedule id")
    return await app.activities.update_schedule(session, schedule)


@router.put("/schedules/{schedule_id}/patch")
async def patch_schedule(
    schedule_id: str, patch: SchedulePatch, app: AppDep, session: SessionDep
) -> Schedule:
    return await app.activities.patch_schedule(session, schedule_id, patch)


# =============================================================================
# Activity notes
# =============================================================================


@router.post("/activity_notes", status_code=201)
async def create_activity_note(note: ActivityNote, app: AppDep, session: SessionDep) -> ActivityNote:
    return await app.activities.create_activity_note(session, note)


@router.get("/kids/{kid_id}/activity_notes")
async def get_activity_notes(
    kid_id: str, app: AppDep, session: SessionDep, activity_id: str | None = None
) -> list[ActivityNote]:
    return await app.activities.get_activity_notes(session, kid_id, activity_id)
