from datetime import datetime

from pydantic import BaseModel, Field

from ticketing.core.config import MAX_TICKETS_PER_PURCHASE
from ticketing.schemas.events import EventOut


class PurchaseRequest(BaseModel):
    event_id: int = Field(ge=1)
    user_id: int = Field(ge=1)
    quantity: int = Field(ge=1, le=MAX_TICKETS_PER_PURCHASE)


class TicketOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    ticket_number: str
    purchase_date: datetime
    status: str

    class Config:
        from_attributes = True


class TicketWithEventOut(TicketOut):
    event: EventOut


class PurchaseOut(BaseModel):
    success: bool = True
    message: str = "Tickets purchased successfully"
    tickets: list[TicketOut]
    remaining_capacity: int


class UserTicketsOut(BaseModel):
    success: bool = True
    tickets: list[TicketWithEventOut]
