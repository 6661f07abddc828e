"""Capacity ledger: how many tickets remain for an event right now.

Nothing is stored here. Availability is derived from ``Event.capacity`` and a
count of non-voided tickets, read through the caller's session so that inside
a purchase it sees the same transaction the allocation writes to.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ticketing.models.events import Event
from ticketing.models.tickets import Ticket, TicketStatus
from ticketing.services.errors import EventNotFoundError, ValidationError


def count_active_tickets(db: Session, event_id: int) -> int:
    count = db.scalar(
        select(func.count(Ticket.id)).where(
            Ticket.event_id == event_id,
            Ticket.status != TicketStatus.VOIDED.value,
        )
    )
    return int(count or 0)


def get_available(db: Session, event_id: int) -> int:
    capacity = db.scalar(select(Event.capacity).where(Event.id == event_id))
    if capacity is None:
        raise EventNotFoundError(event_id)
    return capacity - count_active_tickets(db, event_id)


def has_available(db: Session, event_id: int, quantity: int) -> bool:
    if quantity < 1:
        raise ValidationError("quantity", "The quantity must be at least 1.")
    return get_available(db, event_id) >= quantity


def get_event_availability(db: Session, event_id: int) -> dict:
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFoundError(event_id)

    sold = count_active_tickets(db, event_id)
    return {
        "event_id": event.id,
        "capacity": event.capacity,
        "sold_tickets": sold,
        "available_tickets": event.capacity - sold,
    }
