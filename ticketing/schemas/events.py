from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class EventCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    capacity: int = Field(ge=0)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    event_date: datetime
    location: str = Field(min_length=1, max_length=255)

    @field_validator("event_date")
    @classmethod
    def validate_event_date(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("event_date must include a UTC offset")
        return v.astimezone(timezone.utc)


class EventOut(BaseModel):
    id: int
    name: str
    description: str
    capacity: int
    price: Decimal
    event_date: datetime
    location: str

    class Config:
        from_attributes = True


class AvailableEventOut(EventOut):
    available_tickets: int
    sold_tickets: int


class AvailableEventsOut(BaseModel):
    success: bool = True
    events: list[AvailableEventOut]


class EventAvailabilityOut(BaseModel):
    event_id: int
    capacity: int
    sold_tickets: int
    available_tickets: int
