import enum
from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticketing.database.db import Base, UTCDateTime
from ticketing.models.events import Event
from ticketing.models.users import User


class TicketStatus(str, enum.Enum):
    ACTIVE = "active"
    VOIDED = "voided"


class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    ticket_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    purchase_date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=TicketStatus.ACTIVE.value)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, server_default=func.now(), onupdate=func.now()
    )

    event: Mapped[Event] = relationship(back_populates="tickets")
    user: Mapped[User] = relationship()

    def __repr__(self) -> str:
        return f"<Ticket id={self.id} number={self.ticket_number} event_id={self.event_id} status={self.status}>"
