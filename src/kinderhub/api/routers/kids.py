"""Kid, guardian, health, vaccine and medicine endpoints.

- POST /api/v4/kids                          - Create kid
- GET  /api/v4/kids/mine                     - Kids of the caller
- GET  /api/v4/users/{user_id}/kids          - Kids of a user
- GET  /api/v4/classes/{class_id}/kids       - Kids of a class
- GET  /api/v4/kids/{kid_id}                 - Get kid
- PUT  /api/v4/kids/{kid_id}                 - Update kid
- PUT  /api/v4/kids/{kid_id}/patch           - Patch kid
- POST /api/v4/kids/{kid_id}/guardians       - Join a guardian
- GET  /api/v4/kids/{kid_id}/guardians       - List guardians
- POST /api/v4/kids/{kid_id}/healths         - Record health measurement
- GET  /api/v4/kids/{kid_id}/healths         - List health measurements
- GET  /api/v4/healths/{health_id}           - Get health measurement
- PUT  /api/v4/healths/{health_id}           - Update health measurement
- PUT  /api/v4/healths/{health_id}/patch     - Patch health measurement
- POST /api/v4/kids/{kid_id}/vaccines        - Record vaccination
- GET  /api/v4/kids/{kid_id}/vaccines        - List vaccinations
- GET  /api/v4/vaccine_book                  - Vaccine book
- POST /api/v4/kids/{kid_id}/medicines       - Hand in medicine request
- GET  /api/v4/kids/{kid_id}/medicines       - Medicine requests of a kid
- GET  /api/v4/classes/{class_id}/medicines  - Medicine requests of a class
- GET  /api/v4/medicines/{request_id}        - Get medicine request
- PUT  /api/v4/medicines/{request_id}        - Update medicine request
- PUT  /api/v4/medicines/{request_id}/patch  - Patch medicine request
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from kinderhub.api.deps import AppDep, SessionDep, require_matching_id
from kinderhub.model import (
    Health,
    HealthPatch,
    Kid,
    KidGuardian,
    KidPatch,
    MedicineRequest,
    MedicineRequestPatch,
    Vaccine,
)

router = APIRouter(prefix="/api/v4", tags=["kids"])


class GuardianRequest(BaseModel):
    user_id: str
    is_parent: bool = True


# =============================================================================
# Kids
# =============================================================================


@router.post("/kids", status_code=201)
async def create_kid(kid: Kid, app: AppDep, session: SessionDep) -> Kid:
    return await app.kids.create_kid(session, kid)


@router.get("/kids/mine")
async def get_my_kids(app: AppDep, session: SessionDep) -> list[Kid]:
    return await app.kids.get_kids_for_user(session, session.user_id)


@router.get("/users/{user_id}/kids")
async def get_kids_for_user(user_id: str, app: AppDep, session: SessionDep) -> list[Kid]:
    return await app.kids.get_kids_for_user(session, user_id)


@router.get("/classes/{class_id}/kids")
async def get_kids_by_class(class_id: str, app: AppDep, session: SessionDep) -> list[Kid]:
    return await app.kids.get_kids_by_class(session, class_id)


@router.get("/kids/{kid_id}")
async def get_kid(kid_id: str, app: AppDep, session: SessionDep) -> Kid:
    return await app.kids.get_kid(session, kid_id)


@router.put("/kids/{kid_id}")
async def update_kid(kid_id: str, kid: Kid, app: AppDep, session: SessionDep) -> Kid:
    require_matching_id(kid_id, kid.id, "kid id")
    return await app.kids.update_kid(session, kid)


@router.put("/kids/{kid_id}/patch")
async def patch_kid(kid_id: str, patch: KidPatch, app: AppDep, session: SessionDep) -> Kid:
    return await app.kids.patch_kid(session, kid_id, patch)


@router.post("/kids/{kid_id}/guardians", status_code=201)
async def join_guardian(
    kid_id: str, body: GuardianRequest, app: AppDep, session: SessionDep
) -> KidGuardian:
    return await app.kids.join_guardian(session, kid_id, body.user_id, body.is_parent)


@router.get("/kids/{kid_id}/guardians")
async def get_guardians(kid_id: str, app: AppDep, session: SessionDep) -> list[KidGuardian]:
    return await app.kids.get_guardians(session, kid_id)


# =============================================================================
# Health and vaccines
# =============================================================================


@router.post("/kids/{kid_id}/healths", status_code=201)
async def create_health(kid_id: str, health: Health, app: AppDep, session: SessionDep) -> Health:
    health.kid_id = kid_id
    return await app.health.create_health(session, health)


@router.get("/kids/{kid_id}/healths")
async def get_healths(kid_id: str, app: AppDep, session: SessionDep) -> list[Health]:
    return await app.health.get_healths(session, kid_id)


@router.get("/healths/{health_id}")
async def get_health(health_id: str, app: AppDep, session: SessionDep) -> Health:
    return await app.health.get_health(session, health_id)


@router.put("/healths/{health_id}")
async def update_health(health_id: str, health: Health, app: AppDep, session: SessionDep) -> Health:
    require_matching_id(health_id, health.id, "health id")
    return await app.health.update_health(session, health)


@router.put("/healths/{health_id}/patch")
async def patch_health(
    health_id: str, patch: HealthPatch, app: AppDep, session: SessionDep
) -> Health:
    return await app.health.patch_health(session, health_id, patch)


@router.post("/kids/{kid_id}/vaccines", status_code=201)
async def create_vaccine(kid_id: str, vaccine: Vaccine, app: AppDep, session: SessionDep) -> Vaccine:
    vaccine.kid_id = kid_id
    return await app.health.create_vaccine(session, vaccine)


@router.get("/kids/{kid_id}/vaccines")
async def get_vaccines(kid_id: str, app: AppDep, session: SessionDep) -> list[Vaccine]:
    return await app.health.get_vaccines(session, kid_id)


@router.get("/vaccine_book")
async def get_vaccine_book(app: AppDep, session: SessionDep) -> list[dict[str, Any]]:
    return [asdict(entry) for entry in app.health.get_vaccine_book()]


# =============================================================================
# Medicine requests
# =============================================================================


@router.post("/kids/{kid_id}/medicines", status_code=201)
async def create_medicine_request(
    kid_id: str, request: MedicineRequest, app: AppDep, session: SessionDep
) -> MedicineRequest:
    request.kid_id = kid_id
    return await app.medicine.create_request(session, request)


@router.get("/kids/{kid_id}/medicines")
async def get_medicine_requests_for_kid(
    kid_id: str, app: AppDep, session: SessionDep
) -> list[MedicineRequest]:
    return await app.medicine.get_requests_by_kid(session, kid_id)


@router.get("/classes/{class_id}/medicines")
async def get_medicine_requests_for_class(
    class_id: str, from_date: int, to_date: int, app: AppDep, session: SessionDep
) -> list[MedicineRequest]:
    return await app.medicine.get_requests_by_class(session, class_id, from_date, to_date)


@router.get("/medicines/{request_id}")
async def get_medicine_request(request_id: str, app: AppDep, session: SessionDep) -> MedicineRequest:
    return await app.medicine.get_request(session, request_id)


@router.put("/medicines/{request_id}")
async def update_medicine_request(
    request_id: str, request: MedicineRequest, app: AppDep, session: SessionDep
) -> MedicineRequest:
    require_matching_id(request_id, request.id, "medicine request id")
    return await app.medicine.update_request(session, request)


@router.put("/medicines/{request_id}/patch")
async def patch_medicine_request(
    request_id: str, patch: MedicineRequestPatch, app: AppDep, session: SessionDep
) -> MedicineRequest:
    return await app.medicine.patch_request(session, request_id, patch)
