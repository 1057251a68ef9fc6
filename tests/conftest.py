"""Shared test fixtures and helpers."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from salon.schemas.booking_schema import Booking, BookingStatus, ClientInfo
from salon.schemas.procedure_schema import Procedure
from salon.schemas.schedule_schema import ScheduleTemplate
from salon.services.scheduler import StudioScheduler
from salon.store.memory import InMemoryStore

# A Monday; Sunday is the day before.
TODAY = date(2026, 10, 19)
assert TODAY.weekday() == 0

PROCEDURES = [
    Procedure(id="PR-REMOCAO", name="Remoção", price=30, duration_minutes=30),
    Procedure(id="PR-LIFTING", name="Lash Lifting", price=90, duration_minutes=60),
    Procedure(id="PR-EXPRESS", name="Volume Express", price=80, duration_minutes=90),
    Procedure(id="PR-BRASIL", name="Volume Brasileiro", price=100, duration_minutes=120),
]


def day(offset: int) -> str:
    """ISO date ``offset`` days after TODAY."""
    return (TODAY + timedelta(days=offset)).isoformat()


def make_booking(
    booking_id: str = "BK-TEST01",
    booking_date: Optional[str] = None,
    start_time: str = "10:00",
    duration: int = 90,
    status: BookingStatus = BookingStatus.CONFIRMED,
    procedure_id: str = "PR-EXPRESS",
    procedure_name: str = "Volume Express",
    price: float = 80,
    client_name: str = "Ana Souza",
    client_contact: str = "(11) 98765-4321",
    client_birth_date: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id,
        procedure_id=procedure_id,
        procedure_name=procedure_name,
        price=price,
        duration_minutes=duration,
        date=booking_date or TODAY.isoformat(),
        start_time=start_time,
        client_name=client_name,
        client_contact=client_contact,
        client_birth_date=client_birth_date,
        status=status,
        created_at=created_at or datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc),
    )


def make_client(name: str = "Ana Souza", contact: str = "(11) 98765-4321") -> ClientInfo:
    return ClientInfo(name=name, contact=contact)


@pytest.fixture
def template():
    return ScheduleTemplate(
        active_weekdays={1, 2, 3, 4, 5, 6},
        sunday_scheduling=False,
        day_start="08:00",
        day_end="20:30",
        slot_interval=30,
        last_bookable_start="18:00",
    )


@pytest.fixture
def store(template):
    return InMemoryStore(template=template, procedures=PROCEDURES)


@pytest.fixture
def scheduler(store):
    return StudioScheduler(store, clock=lambda: TODAY)
