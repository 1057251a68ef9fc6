"""
In-process booking store.

Backs the scheduler in tests and single-process deployments. Transactions
are serialised with one ``asyncio.Lock`` and stage their writes until the
transaction function returns, so a failing function leaves nothing behind.
A production deployment swaps this for a store over the studio's hosted
document database implementing the same ``BookingStore`` contract.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from salon.config import ScheduleDefaults, settings
from salon.errors import RecordNotFound, StoreUnavailable
from salon.schemas.booking_schema import Booking, BookingStatus, RevenueEntry
from salon.schemas.procedure_schema import Procedure
from salon.schemas.schedule_schema import ScheduleTemplate
from salon.store.base import BookingStore, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _select(
    bookings: Iterable[Booking],
    date: Optional[str],
    statuses: Optional[Iterable[BookingStatus]],
) -> list[Booking]:
    wanted = set(statuses) if statuses is not None else None
    selected = [
        b.model_copy()
        for b in bookings
        if (date is None or b.date == date) and (wanted is None or b.status in wanted)
    ]
    selected.sort(key=lambda b: b.created_at, reverse=True)
    return selected


class _MemoryTransaction(Transaction):
    """Staged view over the store; writes land only on commit."""

    def __init__(self, store: "InMemoryStore") -> None:
        self._store = store
        self._written: dict[str, Booking] = {}
        self._deleted: set[str] = set()
        self._revenue: list[RevenueEntry] = []

    def _view(self) -> dict[str, Booking]:
        merged = {
            bid: b for bid, b in self._store._bookings.items() if bid not in self._deleted
        }
        merged.update(self._written)
        return merged

    async def read_bookings(
        self,
        date: Optional[str] = None,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        await self._store._round_trip()
        return _select(self._view().values(), date, statuses)

    async def read_booking(self, booking_id: str) -> Optional[Booking]:
        await self._store._round_trip()
        booking = self._view().get(booking_id)
        return booking.model_copy() if booking else None

    async def insert_booking(self, booking: Booking) -> None:
        if booking.id in self._view():
            raise ValueError(f"Booking id {booking.id} already exists")
        self._deleted.discard(booking.id)
        self._written[booking.id] = booking.model_copy()

    async def update_booking_fields(self, booking_id: str, fields: dict[str, Any]) -> Booking:
        current = self._view().get(booking_id)
        if current is None:
            raise RecordNotFound("booking", booking_id)
        updated = Booking.model_validate({**current.model_dump(), **fields})
        self._written[booking_id] = updated
        return updated.model_copy()

    async def delete_booking(self, booking_id: str) -> None:
        if booking_id not in self._view():
            raise RecordNotFound("booking", booking_id)
        self._written.pop(booking_id, None)
        self._deleted.add(booking_id)

    async def read_revenue_entries(self, booking_id: Optional[str] = None) -> list[RevenueEntry]:
        await self._store._round_trip()
        entries = list(self._store._revenue.values()) + self._revenue
        return [e for e in entries if booking_id is None or e.booking_id == booking_id]

    async def insert_revenue_entry(self, entry: RevenueEntry) -> None:
        self._revenue.append(entry.model_copy())

    def commit(self) -> None:
        for booking_id in self._deleted:
            self._store._bookings.pop(booking_id, None)
        self._store._bookings.update(self._written)
        for entry in self._revenue:
            self._store._revenue[entry.id] = entry


class InMemoryStore(BookingStore):
    """Dictionary-backed ``BookingStore`` with serialised transactions."""

    def __init__(
        self,
        template: Optional[ScheduleTemplate] = None,
        procedures: Optional[Iterable[Procedure]] = None,
        bookings: Optional[Iterable[Booking]] = None,
        defaults: Optional[ScheduleDefaults] = None,
        timeout_sec: Optional[float] = None,
        latency_sec: float = 0.0,
    ) -> None:
        self._template = template
        self._defaults = defaults or settings.schedule
        self._procedures: dict[str, Procedure] = {p.id: p for p in procedures or []}
        self._bookings: dict[str, Booking] = {b.id: b for b in bookings or []}
        self._revenue: dict[str, RevenueEntry] = {}
        self._timeout = (
            timeout_sec if timeout_sec is not None else settings.booking.store_timeout_sec
        )
        self._latency = latency_sec
        self._available = True
        self._lock = asyncio.Lock()

    def set_available(self, available: bool) -> None:
        """Simulate the backing service going down or coming back."""
        self._available = available

    async def _round_trip(self) -> None:
        if not self._available:
            raise StoreUnavailable("Booking store is unreachable.")
        # Yield to the loop like a network call would.
        await asyncio.sleep(self._latency)

    async def _bounded(self, coro: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError:
            raise StoreUnavailable(
                f"Booking store did not respond within {self._timeout}s."
            ) from None

    # ------------------------------------------------------------------ #
    # Schedule template
    # ------------------------------------------------------------------ #

    async def read_schedule_template(self) -> ScheduleTemplate:
        await self._bounded(self._round_trip())
        if self._template is None:
            self._template = ScheduleTemplate.from_defaults(self._defaults)
            logger.info("Schedule template created from defaults")
        return self._template.model_copy(deep=True)

    async def write_schedule_template(self, template: ScheduleTemplate) -> None:
        await self._bounded(self._round_trip())
        self._template = template.model_copy(deep=True)
        logger.info("Schedule template updated")

    # ------------------------------------------------------------------ #
    # Procedures
    # ------------------------------------------------------------------ #

    async def read_procedures(self) -> list[Procedure]:
        await self._bounded(self._round_trip())
        return sorted((p.model_copy() for p in self._procedures.values()), key=lambda p: p.name)

    async def read_procedure(self, procedure_id: str) -> Optional[Procedure]:
        await self._bounded(self._round_trip())
        procedure = self._procedures.get(procedure_id)
        return procedure.model_copy() if procedure else None

    async def insert_procedure(self, procedure: Procedure) -> None:
        await self._bounded(self._round_trip())
        if procedure.id in self._procedures:
            raise ValueError(f"Procedure id {procedure.id} already exists")
        self._procedures[procedure.id] = procedure.model_copy()

    async def update_procedure(self, procedure_id: str, fields: dict[str, Any]) -> Procedure:
        await self._bounded(self._round_trip())
        current = self._procedures.get(procedure_id)
        if current is None:
            raise RecordNotFound("procedure", procedure_id)
        updated = current.model_copy(update=fields)
        self._procedures[procedure_id] = updated
        return updated.model_copy()

    async def delete_procedure(self, procedure_id: str) -> None:
        await self._bounded(self._round_trip())
        if self._procedures.pop(procedure_id, None) is None:
            raise RecordNotFound("procedure", procedure_id)

    # ------------------------------------------------------------------ #
    # Bookings and revenue
    # ------------------------------------------------------------------ #

    async def read_bookings(
        self,
        date: Optional[str] = None,
        statuses: Optional[Iterable[BookingStatus]] = None,
    ) -> list[Booking]:
        await self._bounded(self._round_trip())
        return _select(self._bookings.values(), date, statuses)

    async def read_booking(self, booking_id: str) -> Optional[Booking]:
        await self._bounded(self._round_trip())
        booking = self._bookings.get(booking_id)
        return booking.model_copy() if booking else None

    async def update_booking_fields(self, booking_id: str, fields: dict[str, Any]) -> Booking:
        async def _update(tx: Transaction) -> Booking:
            return await tx.update_booking_fields(booking_id, fields)

        return await self.run_atomic(_update)

    async def read_revenue_entries(self, booking_id: Optional[str] = None) -> list[RevenueEntry]:
        await self._bounded(self._round_trip())
        return [
            e.model_copy()
            for e in self._revenue.values()
            if booking_id is None or e.booking_id == booking_id
        ]

    async def run_atomic(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        async def _attempt() -> T:
            async with self._lock:
                await self._round_trip()
                tx = _MemoryTransaction(self)
                result = await fn(tx)
                tx.commit()
                return result

        return await self._bounded(_attempt())
