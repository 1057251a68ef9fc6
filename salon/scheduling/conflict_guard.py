"""
Conflict guard: commit-time overlap check for new and moved bookings.

Availability shown to a client can be stale by the time they submit, so
every write that places a booking on the calendar re-reads the day inside
the store transaction and rejects on any overlap. Two concurrent attempts
for overlapping intervals are serialised by the store; the second one sees
the first one's booking and fails with ``SlotConflict``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from salon.errors import InvalidTransition, RecordNotFound, SlotConflict
from salon.logging_context import get_request_logger
from salon.schemas.booking_schema import (
    OCCUPYING_STATUSES,
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
)
from salon.scheduling.occupancy import find_conflict
from salon.store.base import BookingStore, Transaction
from salon.utils import time_to_minutes

logger = get_request_logger(__name__)


async def check_slot_free(
    tx: Transaction,
    date: str,
    start_time: str,
    duration: int,
    exclude_id: Optional[str] = None,
) -> None:
    """Raise SlotConflict if ``[start_time, start_time+duration)`` is taken on ``date``.

    Must run inside ``run_atomic`` so the read and the following write
    commit together.
    """
    day_bookings = await tx.read_bookings(date=date, statuses=OCCUPYING_STATUSES)
    clash = find_conflict(time_to_minutes(start_time), duration, day_bookings, exclude_id)
    if clash is not None:
        logger.warning(
            "Slot conflict on %s at %s (%d min) with booking %s at %s",
            date, start_time, duration, clash.id, clash.start_time,
        )
        raise SlotConflict(date, start_time, conflicting_id=clash.id)


async def try_reserve(store: BookingStore, booking: Booking) -> Booking:
    """
    Insert ``booking`` if its interval is free.

    Returns:
        The stored booking.

    Raises:
        SlotConflict: If an occupying booking overlaps.
        StoreUnavailable: If the store cannot complete the transaction.
    """

    async def _reserve(tx: Transaction) -> Booking:
        await check_slot_free(tx, booking.date, booking.start_time, booking.duration_minutes)
        await tx.insert_booking(booking)
        return booking

    stored = await store.run_atomic(_reserve)
    logger.info(
        "Booking %s reserved on %s at %s as %s",
        stored.id, stored.date, stored.start_time, stored.status.value,
    )
    return stored


async def try_reschedule(
    store: BookingStore,
    booking_id: str,
    new_date: str,
    new_start_time: str,
    fields: Optional[dict[str, Any]] = None,
) -> Booking:
    """
    Move a booking to ``new_date``/``new_start_time`` and apply ``fields``.

    The overlap check only runs when the date or start time actually changed,
    and ignores the booking's own record. The booking goes back to
    ``pending`` so it is re-confirmed at its new place.

    Raises:
        RecordNotFound: If the booking does not exist.
        InvalidTransition: If the booking is cancelled or completed.
        SlotConflict: If the new interval overlaps an occupying booking.
    """
    fields = dict(fields or {})

    async def _reschedule(tx: Transaction) -> Booking:
        current = await tx.read_booking(booking_id)
        if current is None:
            raise RecordNotFound("booking", booking_id)
        if current.status in TERMINAL_STATUSES:
            raise InvalidTransition(booking_id, current.status.value, BookingStatus.PENDING.value)

        moved = new_date != current.date or new_start_time != current.start_time
        if moved:
            duration = fields.get("duration_minutes", current.duration_minutes)
            await check_slot_free(tx, new_date, new_start_time, duration, exclude_id=booking_id)

        fields.update(
            date=new_date,
            start_time=new_start_time,
            status=BookingStatus.PENDING,
            updated_at=datetime.now(timezone.utc),
        )
        return await tx.update_booking_fields(booking_id, fields)

    updated = await store.run_atomic(_reschedule)
    logger.info("Booking %s rescheduled to %s at %s", booking_id, new_date, new_start_time)
    return updated
