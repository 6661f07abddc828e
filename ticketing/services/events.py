"""Read-only projections over events and tickets, plus event creation.

No locking: these are point-in-time reads.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ticketing.core.clock import Clock, system_clock
from ticketing.models.events import Event
from ticketing.models.tickets import Ticket, TicketStatus
from ticketing.models.users import User
from ticketing.schemas.events import EventCreate
from ticketing.services.errors import ValidationError


def create_event(db: Session, payload: EventCreate) -> Event:
    event = Event(
        name=payload.name,
        description=payload.description,
        capacity=payload.capacity,
        price=payload.price,
        event_date=payload.event_date,
        location=payload.location,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def list_upcoming_events(db: Session, clock: Clock = system_clock) -> list[dict]:
    """Return events dated strictly after now, with live sold/available counts."""
    sold_counts = (
        select(Ticket.event_id, func.count(Ticket.id).label("sold"))
        .where(Ticket.status != TicketStatus.VOIDED.value)
        .group_by(Ticket.event_id)
        .subquery()
    )
    rows = db.execute(
        select(Event, func.coalesce(sold_counts.c.sold, 0))
        .outerjoin(sold_counts, sold_counts.c.event_id == Event.id)
        .where(Event.event_date > clock.now())
        .order_by(Event.id)
    ).all()

    return [
        {
            "id": event.id,
            "name": event.name,
            "description": event.description,
            "capacity": event.capacity,
            "price": event.price,
            "event_date": event.event_date,
            "location": event.location,
            "available_tickets": event.capacity - sold,
            "sold_tickets": sold,
        }
        for event, sold in rows
    ]


def list_user_tickets(db: Session, user_id: int) -> list[Ticket]:
    """Return every ticket the user owns, whatever its status, with its event loaded."""
    if db.get(User, user_id) is None:
        raise ValidationError("user_id", "The selected user id is invalid.")

    return list(
        db.scalars(
            select(Ticket)
            .where(Ticket.user_id == user_id)
            .options(selectinload(Ticket.event))
            .order_by(Ticket.id)
        )
    )
