"""Event endpoints.

- POST /api/v4/classes/{class_id}/events                          - Create event
- GET  /api/v4/classes/{class_id}/events                          - Events of a class
- GET  /api/v4/events/{event_id}                                  - Get event
- PUT  /api/v4/events/{event_id}                                  - Update event
- PUT  /api/v4/events/{event_id}/patch                            - Patch event
- POST /api/v4/events/{event_id}/registrations                    - Register a kid
- GET  /api/v4/events/{event_id}/registrations                    - List registrations
- PUT  /api/v4/events/{event_id}/registrations/{kid_id}/paid      - Set paid flag
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from kinderhub.api.deps import AppDep, SessionDep, require_matching_id
from kinderhub.model import Event, EventPatch, EventRegistration

router = APIRouter(prefix="/api/v4", tags=["events"])


class RegistrationRequest(BaseModel):
    kid_id: str


class PaidRequest(BaseModel):
    paid: bool


@router.post("/classes/{class_id}/events", status_code=201)
async def create_event(class_id: str, event: Event, app: AppDep, session: SessionDep) -> Event:
    return await app.events.create_event(session, class_id, event)


@router.get("/classes/{class_id}/events")
async def get_events(class_id: str, app: AppDep, session: SessionDep) -> list[Event]:
    return await app.events.get_events(session, class_id)


@router.get("/events/{event_id}")
async def get_event(event_id: str, app: AppDep, session: SessionDep) -> Event:
    return await app.events.get_event(session, event_id)


@router.put("/events/{event_id}")
async def update_event(event_id: str, event: Event, app: AppDep, session: SessionDep) -> Event:
    require_matching_id(event_id, event.id, "event id")
    return await app.events.update_event(session, event)


@router.put("/events/{event_id}/patch")
async def patch_event(event_id: str, patch: EventPatch, app: AppDep, session: SessionDep) -> Event:
    return await app.events.patch_event(session, event_id, patch)


@router.post("/events/{event_id}/registrations", status_code=201)
async def register_kid(
    event_id: str, body: RegistrationRequest, app: AppDep, session: SessionDep
) -> EventRegistration:
    return await app.events.register_kid(session, event_id, body.kid_id)


@router.get("/events/{event_id}/registrations")
async def get_registrations(
    event_id: str, app: AppDep, session: SessionDep
) -> list[EventRegistration]:
    return await app.events.get_registrations(session, event_id)


@router.put("/events/{event_id}/registrations/{kid_id}/paid")
async def set_registration_paid(
    event_id: str, kid_id: str, body: PaidRequest, app: AppDep, session: SessionDep
) -> EventRegistration:
    return await app.events.set_registration_paid(session, event_id, kid_id, body.paid)
