from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bottin.auth.dependencies import require_auth
from bottin.auth.sessions import SessionRecord
from bottin.db.session import get_db
from bottin.events.schemas import EventCreate, EventResponse, EventUpdate
from bottin.events.services import (
    EventNotFoundError,
    EventPermissionError,
    EventService,
    InvalidOrganizerError,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/events", tags=["events"])


# ===============================
# GET EVENTS
# ===============================
@router.get("", response_model=List[EventResponse])
async def get_events(
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of events"),
    organizer_id: Optional[int] = Query(None, alias="organizerId", description="Organizer ID"),
    db: AsyncSession = Depends(get_db),
):
    return await EventService(db).get_events(limit=limit, organizer_id=organizer_id)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, db: AsyncSession = Depends(get_db)):
    try:
        return await EventService(db).get_event(event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")


# ===============================
# EVENT CREATION
# ===============================
@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await EventService(db).create_event(event_data, session)
    except EventPermissionError:
        raise HTTPException(status_code=403, detail="Forbidden")
    except InvalidOrganizerError:
        raise HTTPException(status_code=400, detail="Organizer not found")


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await EventService(db).update_event(event_id, event_data, session)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except EventPermissionError:
        raise HTTPException(status_code=403, detail="Forbidden")
    except InvalidOrganizerError:
        raise HTTPException(status_code=400, detail="Organizer not found")


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    session: SessionRecord = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    try:
        await EventService(db).delete_event(event_id, session)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except EventPermissionError:
        raise HTTPException(status_code=403, detail="Forbidden")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
