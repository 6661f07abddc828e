from loguru import logger
from sqlalchemy import select

from ticketing.core.celery_config import celery_app
from ticketing.database.db import SessionLocal
from ticketing.models.tickets import Ticket


@celery_app.task(bind=True)
def send_purchase_confirmation_task(self, ticket_ids: list[int]) -> list[str]:
    """Confirm issued tickets to their owner (logged in place of email/PDF delivery)."""
    db = SessionLocal()
    try:
        tickets = list(db.scalars(select(Ticket).where(Ticket.id.in_(ticket_ids)).order_by(Ticket.id)))
        if not tickets:
            logger.warning(f"No tickets found to confirm for ids {ticket_ids}")
            return []

        numbers = [ticket.ticket_number for ticket in tickets]
        logger.info(
            f"Confirmation for user {tickets[0].user_id}, event {tickets[0].event_id}: "
            f"{', '.join(numbers)}"
        )
        return numbers
    finally:
        db.close()
