"""Booking, client, and revenue data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from salon.utils import is_time_of_day, parse_date


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _optional_iso_date(value: Optional[str]) -> Optional[str]:
    if value:
        parse_date(value)
        return value
    return None


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses whose interval blocks the calendar.
OCCUPYING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.CONFIRMED, BookingStatus.COMPLETED}
)

TERMINAL_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.CANCELLED, BookingStatus.COMPLETED}
)


class ClientInfo(BaseModel):
    """Client details captured with a reservation."""
    name: str = Field(min_length=1)
    contact: str = Field(min_length=1)
    birth_date: Optional[str] = None

    @field_validator("birth_date")
    @classmethod
    def _birth_date(cls, value: Optional[str]) -> Optional[str]:
        return _optional_iso_date(value)


class Booking(BaseModel):
    """
    A reservation of one procedure at one date and start time.

    ``procedure_name``, ``price`` and ``duration_minutes`` are a snapshot
    taken at creation; later procedure edits never change them.
    """

    id: str
    procedure_id: str
    procedure_name: str
    price: float = Field(ge=0)
    duration_minutes: int = Field(gt=0)
    date: str
    start_time: str
    client_name: str
    client_contact: str
    client_birth_date: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None
    reminder_sent: bool = False
    maintenance_reminder_sent: bool = False

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        parse_date(value)
        return value

    @field_validator("client_birth_date")
    @classmethod
    def _birth_date(cls, value: Optional[str]) -> Optional[str]:
        return _optional_iso_date(value)

    @field_validator("start_time")
    @classmethod
    def _time_of_day(cls, value: str) -> str:
        if not is_time_of_day(value):
            raise ValueError(f"expected HH:MM, got {value!r}")
        return value

    @property
    def is_occupying(self) -> bool:
        return self.status in OCCUPYING_STATUSES


class RevenueEntry(BaseModel):
    """Ledger entry posted when a booking is completed."""
    id: str
    description: str
    amount: float
    date: str
    booking_id: str
    category_name: str
    created_at: datetime = Field(default_factory=_utcnow)
