from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy.orm import Session

from ticketing.core.clock import Clock, get_clock
from ticketing.database.db import get_db
from ticketing.schemas.tickets import PurchaseOut, PurchaseRequest, UserTicketsOut
from ticketing.services.events import list_user_tickets
from ticketing.services.tickets import purchase_tickets
from ticketing.tasks import send_purchase_confirmation_task

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("/purchase", response_model=PurchaseOut, status_code=status.HTTP_201_CREATED)
def purchase(
    payload: PurchaseRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    result = purchase_tickets(
        db,
        event_id=payload.event_id,
        user_id=payload.user_id,
        quantity=payload.quantity,
        clock=clock,
    )

    # confirmation is best-effort; the tickets are already committed
    ticket_ids = [ticket.id for ticket in result.tickets]
    try:
        send_purchase_confirmation_task.delay(ticket_ids)
    except Exception:
        logger.exception(f"Could not enqueue confirmation for tickets {ticket_ids}")

    return {"tickets": result.tickets, "remaining_capacity": result.remaining_capacity}


@router.get("/user-tickets", response_model=UserTicketsOut)
def user_tickets(user_id: int = Query(ge=1), db: Session = Depends(get_db)):
    return {"tickets": list_user_tickets(db, user_id)}
