"""
Persistence interface consumed by the scheduling core.

The core only talks to storage through these two classes. A store backed by
a hosted document database, SQL, or memory must honour the same contract:
``run_atomic`` executes its function with read-your-writes consistency and
commits all of the function's writes or none of them, serialised against
other ``run_atomic`` calls that touch the same bookings.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from salon.schemas.booking_schema import Booking, BookingStatus, RevenueEntry
from salon.schemas.procedure_schema import Procedure
from salon.schemas.schedule_schema import ScheduleTemplate

T = TypeVar("T")


class Transaction(ABC):
    """Handle passed to functions executed by ``BookingStore.run_atomic``."""

    @abstractmethod
    async def read_bookings(
        self,
        date: Optional[str] = None,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        ...

    @abstractmethod
    async def read_booking(self, booking_id: str) -> Optional[Booking]:
        ...

    @abstractmethod
    async def insert_booking(self, booking: Booking) -> None:
        ...

    @abstractmethod
    async def update_booking_fields(self, booking_id: str, fields: dict[str, Any]) -> Booking:
        ...

    @abstractmethod
    async def delete_booking(self, booking_id: str) -> None:
        ...

    @abstractmethod
    async def read_revenue_entries(self, booking_id: Optional[str] = None) -> list[RevenueEntry]:
        ...

    @abstractmethod
    async def insert_revenue_entry(self, entry: RevenueEntry) -> None:
        ...


class BookingStore(ABC):
    """Storage collaborator for templates, procedures, bookings, and revenue."""

    @abstractmethod
    async def read_schedule_template(self) -> ScheduleTemplate:
        """Return the stored template, creating it from defaults if absent."""

    @abstractmethod
    async def write_schedule_template(self, template: ScheduleTemplate) -> None:
        ...

    @abstractmethod
    async def read_procedures(self) -> list[Procedure]:
        """Return all procedures ordered by name."""

    @abstractmethod
    async def read_procedure(self, procedure_id: str) -> Optional[Procedure]:
        ...

    @abstractmethod
    async def insert_procedure(self, procedure: Procedure) -> None:
        ...

    @abstractmethod
    async def update_procedure(self, procedure_id: str, fields: dict[str, Any]) -> Procedure:
        ...

    @abstractmethod
    async def delete_procedure(self, procedure_id: str) -> None:
        ...

    @abstractmethod
    async def read_bookings(
        self,
        date: Optional[str] = None,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        """Return bookings, newest first, optionally filtered by date and status."""

    @abstractmethod
    async def read_booking(self, booking_id: str) -> Optional[Booking]:
        ...

    @abstractmethod
    async def update_booking_fields(self, booking_id: str, fields: dict[str, Any]) -> Booking:
        """Single-record update outside a transaction (flags, not scheduling fields)."""

    @abstractmethod
    async def read_revenue_entries(self, booking_id: Optional[str] = None) -> list[RevenueEntry]:
        ...

    @abstractmethod
    async def run_atomic(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        """Run ``fn`` in one all-or-nothing transaction and return its result.

        Raises:
            StoreUnavailable: On transport failure or timeout. Nothing is committed.
        """
