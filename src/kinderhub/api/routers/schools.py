"""School, branch and class endpoints.

- POST   /api/v4/schools                                   - Create school
- GET    /api/v4/schools/{school_id}                       - Get school
- PUT    /api/v4/schools/{school_id}                       - Update school
- PUT    /api/v4/schools/{school_id}/patch                 - Patch school
- GET    /api/v4/schools/{school_id}/members               - List members
- GET    /api/v4/users/{user_id}/schools                   - Schools of a user
- GET    /api/v4/schools/{school_id}/branches              - List branches
- POST   /api/v4/schools/{school_id}/branches              - Add branch
- GET    /api/v4/schools/{school_id}/branches/{branch_id}  - Get branch
- DELETE /api/v4/schools/{school_id}/branches/{branch_id}  - Remove branch
- GET    /api/v4/schools/{school_id}/branches/{branch_id}/classes
- GET    /api/v4/schools/{school_id}/classes               - List classes
- POST   /api/v4/schools/{school_id}/classes               - Add class
- DELETE /api/v4/schools/{school_id}/classes/{class_id}    - Remove class
- GET    /api/v4/classes/{class_id}                        - Get class
- PUT    /api/v4/classes/{class_id}                        - Update class
- PUT    /api/v4/classes/{class_id}/patch                  - Patch class
"""

from __future__ import annotations

from fastapi import APIRouter

from kinderhub.api.deps import AppDep, SessionDep, require_matching_id
from kinderhub.model import (
    Branch,
    ClassPatch,
    School,
    SchoolClass,
    SchoolMember,
    SchoolPatch,
)

router = APIRouter(prefix="/api/v4", tags=["schools"])


# =============================================================================
# Schools
# =============================================================================


@router.post("/schools", status_code=201)
async def create_school(school: School, app: AppDep, session: SessionDep) -> School:
    return await app.schools.create_school(session, school)


@router.get("/schools/{school_id}")
async def get_school(school_id: str, app: AppDep, session: SessionDep) -> School:
    return await app.schools.get_school(session, school_id)


@router.put("/schools/{school_id}")
async def update_school(school_id: str, school: School, app: AppDep, session: SessionDep) -> School:
    require_matching_id(school_id, school.id, "school id")
    return await app.schools.update_school(session, school)


@router.put("/schools/{school_id}/patch")
async def patch_school(
    school_id: str, patch: SchoolPatch, app: AppDep, session: SessionDep
) -> School:
    return await app.schools.patch_school(session, school_id, patch)


@router.get("/schools/{school_id}/members")
async def get_school_members(school_id: str, app: AppDep, session: SessionDep) -> list[SchoolMember]:
    return await app.schools.get_members(session, school_id)


@router.get("/users/{user_id}/schools")
async def get_schools_for_user(user_id: str, app: AppDep, session: SessionDep) -> list[School]:
    return await app.schools.get_schools_for_user(session, user_id)


# =============================================================================
# Branches
# =============================================================================


@router.get("/schools/{school_id}/branches")
async def get_branches(school_id: str, app: AppDep, session: SessionDep) -> list[Branch]:
    return await app.schools.get_branches(session, school_id)


@router.post("/schools/{school_id}/branches", status_code=201)
async def add_branch(school_id: str, branch: Branch, app: AppDep, session: SessionDep) -> Branch:
    return await app.schools.add_branch(session, school_id, branch)


@router.get("/schools/{school_id}/branches/{branch_id}")
async def get_branch(school_id: str, branch_id: str, app: AppDep, session: SessionDep) -> Branch:
    return await app.schools.get_branch(session, school_id, branch_id)


@router.delete("/schools/{school_id}/branches/{branch_id}")
async def remove_branch(
    school_id: str, branch_id: str, app: AppDep, session: SessionDep
) -> dict[str, str]:
    await app.schools.remove_branch(session, school_id, branch_id)
    return {"status": "OK"}


@router.get("/schools/{school_id}/branches/{branch_id}/classes")
async def get_classes_by_branch(
    school_id: str, branch_id: str, app: AppDep, session: SessionDep
) -> list[SchoolClass]:
    return await app.schools.get_classes_by_branch(session, school_id, branch_id)


# =============================================================================
# Classes
# =============================================================================


@router.get("/schools/{school_id}/classes")
async def get_classes(school_id: str, app: AppDep, session: SessionDep) -> list[SchoolClass]:
    return await app.schools.get_classes(session, school_id)


@router.post("/schools/{school_id}/classes", status_code=201)
async def add_class(
    school_id: str, school_class: SchoolClass, app: AppDep, session: SessionDep
) -> SchoolClass:
    return await app.schools.add_class(session, school_id, school_class)


@router.delete("/schools/{school_id}/classes/{class_id}")
async def remove_class(
    school_id: str, class_id: str, app: AppDep, session: SessionDep
) -> dict[str, str]:
    await app.schools.remove_class(session, school_id, class_id)
    return {"status": "OK"}


@router.get("/classes/{class_id}")
async def get_class(class_id: str, app: AppDep, session: SessionDep) -> SchoolClass:
    return await app.schools.get_class(session, class_id)


@router.put("/classes/{class_id}")
async def update_class(
    class_id: str, school_class: SchoolClass, app: AppDep, session: SessionDep
) -> SchoolClass:
    require_matching_id(class_id, school_class.id, "class id")
    return await app.schools.update_class(session, school_class)


@router.put("/classes/{class_id}/patch")
async def patch_class(
    class_id: str, patch: ClassPatch, app: AppDep, session: SessionDep
) -> SchoolClass:
    return await app.schools.patch_class(session, class_id, patch)
