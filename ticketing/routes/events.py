from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ticketing.core.clock import Clock, get_clock
from ticketing.database.db import get_db
from ticketing.schemas.events import AvailableEventsOut, EventAvailabilityOut, EventCreate, EventOut
from ticketing.services.events import create_event, list_upcoming_events
from ticketing.services.ledger import get_event_availability

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create(payload: EventCreate, db: Session = Depends(get_db)):
    return create_event(db, payload)


@router.get("/available", response_model=AvailableEventsOut)
def available_events(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)):
    return {"events": list_upcoming_events(db, clock)}


@router.get("/{event_id}/availability", response_model=EventAvailabilityOut)
def event_availability(event_id: int, db: Session = Depends(get_db)):
    return get_event_availability(db, event_id)
