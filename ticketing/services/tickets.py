import uuid
from dataclasses import dataclass

import redis
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from ticketing.core import config
from ticketing.core.clock import Clock, as_utc, system_clock
from ticketing.models.events import Event
from ticketing.models.tickets import Ticket, TicketStatus
from ticketing.models.users import User
from ticketing.services import ledger
from ticketing.services.errors import (
    BusinessRuleError,
    CapacityError,
    RetryableError,
    ValidationError,
)


@dataclass(frozen=True)
class PurchaseResult:
    tickets: list[Ticket]
    remaining_capacity: int


def get_redis_client():
    """Get Redis client for locking."""
    return redis.from_url(config.get_redis_url(), decode_responses=True)


def generate_ticket_number() -> str:
    """Random uuid4-based token; unique system-wide without coordinating with other requests."""
    return f"TKT-{uuid.uuid4().hex.upper()}"


def purchase_tickets(
    db: Session,
    *,
    event_id: int,
    user_id: int,
    quantity: int,
    clock: Clock = system_clock,
) -> PurchaseResult:
    """
    Reserve `quantity` tickets for a user under a per-event Redis lock.

    The capacity check and the ticket inserts run in one transaction while the
    lock is held, so two purchases for the same event can never both pass a
    check that only one of them can satisfy.
    """
    _validate_request(db, event_id=event_id, user_id=user_id, quantity=quantity)

    redis_client = get_redis_client()
    lock = redis_client.lock(f"event_lock:{event_id}", timeout=config.LOCK_TIMEOUT)

    # Only one purchaser per event proceeds; others wait up to LOCK_WAIT_TIMEOUT
    if not lock.acquire(blocking=True, blocking_timeout=config.LOCK_WAIT_TIMEOUT):
        logger.warning(f"Timed out waiting for purchase lock on event {event_id}")
        raise RetryableError(event_id)

    try:
        try:
            result = _purchase_in_transaction(db, event_id, user_id, quantity, clock)
            _confirm_lock_held(lock, event_id)
            db.commit()
        except Exception:
            db.rollback()
            raise
    finally:
        _release_lock(lock, event_id)

    logger.info(
        f"User {user_id} purchased {quantity} ticket(s) for event {event_id}, "
        f"{result.remaining_capacity} remaining"
    )
    return result


def _validate_request(db: Session, *, event_id: int, user_id: int, quantity: int) -> None:
    max_quantity = config.MAX_TICKETS_PER_PURCHASE
    if not 1 <= quantity <= max_quantity:
        raise ValidationError("quantity", f"The quantity must be between 1 and {max_quantity}.")
    if db.scalar(select(User.id).where(User.id == user_id)) is None:
        raise ValidationError("user_id", "The selected user id is invalid.")
    if db.scalar(select(Event.id).where(Event.id == event_id)) is None:
        raise ValidationError("event_id", "The selected event id is invalid.")


def _purchase_in_transaction(
    db: Session, event_id: int, user_id: int, quantity: int, clock: Clock
) -> PurchaseResult:
    """Internal function to allocate tickets within the caller's transaction."""
    # Row lock on the event as well; SQLite ignores FOR UPDATE and relies on the Redis lock
    event = db.scalar(
        select(Event)
        .where(Event.id == event_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if event is None:
        raise ValidationError("event_id", "The selected event id is invalid.")

    now = clock.now()
    if as_utc(event.event_date) <= now:
        logger.info(f"Rejected purchase for past event {event_id}")
        raise BusinessRuleError()

    if not ledger.has_available(db, event_id, quantity):
        remaining = ledger.get_available(db, event_id)
        logger.info(f"Rejected purchase of {quantity} for event {event_id}: only {remaining} left")
        raise CapacityError(remaining)

    tickets = [
        Ticket(
            event_id=event_id,
            user_id=user_id,
            ticket_number=generate_ticket_number(),
            purchase_date=now,
            status=TicketStatus.ACTIVE.value,
        )
        for _ in range(quantity)
    ]
    db.add_all(tickets)
    db.flush()  # assigns ids and makes the new rows visible to the count below

    return PurchaseResult(tickets=tickets, remaining_capacity=ledger.get_available(db, event_id))


def _confirm_lock_held(lock, event_id: int) -> None:
    """Refresh the hold timeout just before commit, or abort if the lock was lost.

    Once the lock has expired another purchaser may already be counting the
    same capacity, so committing would risk overselling.
    """
    try:
        lock.reacquire()
    except redis.exceptions.LockNotOwnedError:
        logger.warning(f"Purchase lock on event {event_id} expired before commit, rolling back")
        raise RetryableError(event_id)


def _release_lock(lock, event_id: int) -> None:
    try:
        lock.release()
    except redis.exceptions.LockError:
        # Only reachable after a lost lock, whose transaction was already rolled back
        logger.warning(f"Purchase lock on event {event_id} expired before release")
