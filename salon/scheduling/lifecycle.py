"""
Booking status state machine.

Defines the allowed status transitions and the effect each one carries:

    pending   -> confirmed   (re-checked against the calendar)
    pending   -> cancelled
    confirmed -> cancelled
    confirmed -> completed   (posts exactly one revenue entry)

``cancelled`` and ``completed`` are terminal. Every status write and its
effect commit in one store transaction.

Usage:
    lifecycle = BookingLifecycle(revenue_category="Serviços Prestados")
    booking = await lifecycle.apply(store, booking_id, BookingStatus.CONFIRMED)
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from salon.errors import InvalidTransition, RecordNotFound
from salon.logging_context import get_request_logger
from salon.schemas.booking_schema import Booking, BookingStatus, RevenueEntry
from salon.scheduling.conflict_guard import check_slot_free
from salon.store.base import BookingStore, Transaction

logger = get_request_logger(__name__)


@dataclass(frozen=True)
class StatusTransition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    rechecks_slot: bool = False
    posts_revenue: bool = False


class BookingLifecycle:
    """
    Validates status changes and applies their effects atomically.

    A transition not listed in ``TRANSITIONS`` is rejected with
    ``InvalidTransition``; that includes repeating a transition, so a second
    completion can never post revenue twice.
    """

    TRANSITIONS: list[StatusTransition] = [
        StatusTransition(BookingStatus.PENDING, BookingStatus.CONFIRMED, rechecks_slot=True),
        StatusTransition(BookingStatus.PENDING, BookingStatus.CANCELLED),
        StatusTransition(BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
        StatusTransition(BookingStatus.CONFIRMED, BookingStatus.COMPLETED, posts_revenue=True),
    ]

    def __init__(self, revenue_category: str) -> None:
        self._revenue_category = revenue_category

    def find(self, from_status: BookingStatus, to_status: BookingStatus) -> Optional[StatusTransition]:
        for t in self.TRANSITIONS:
            if t.from_status == from_status and t.to_status == to_status:
                return t
        return None

    def valid_targets(self, from_status: BookingStatus) -> list[BookingStatus]:
        """Return all statuses reachable in one step from ``from_status``."""
        return [t.to_status for t in self.TRANSITIONS if t.from_status == from_status]

    def is_terminal(self, status: BookingStatus) -> bool:
        return not self.valid_targets(status)

    async def apply(
        self, store: BookingStore, booking_id: str, new_status: BookingStatus
    ) -> Booking:
        """
        Move a booking to ``new_status``.

        Raises:
            RecordNotFound: If the booking does not exist.
            InvalidTransition: If the change is not an allowed transition.
            SlotConflict: If confirming would overlap an occupying booking.
        """

        async def _apply(tx: Transaction) -> Booking:
            current = await tx.read_booking(booking_id)
            if current is None:
                raise RecordNotFound("booking", booking_id)

            transition = self.find(current.status, new_status)
            if transition is None:
                logger.warning(
                    "Rejected transition for %s: %s -> %s (valid: %s)",
                    booking_id, current.status.value, new_status.value,
                    [s.value for s in self.valid_targets(current.status)],
                )
                raise InvalidTransition(booking_id, current.status.value, new_status.value)

            if transition.rechecks_slot:
                await check_slot_free(
                    tx, current.date, current.start_time, current.duration_minutes,
                    exclude_id=booking_id,
                )

            updated = await tx.update_booking_fields(
                booking_id,
                {"status": new_status, "updated_at": datetime.now(timezone.utc)},
            )

            if transition.posts_revenue:
                await self._post_revenue(tx, updated)
            return updated

        booking = await store.run_atomic(_apply)
        logger.info("Booking %s is now %s", booking_id, new_status.value)
        return booking

    async def _post_revenue(self, tx: Transaction, booking: Booking) -> None:
        existing = await tx.read_revenue_entries(booking_id=booking.id)
        if existing:
            raise InvalidTransition(booking.id, BookingStatus.COMPLETED.value,
                                    BookingStatus.COMPLETED.value)
        entry = RevenueEntry(
            id=f"RV-{uuid.uuid4().hex[:8].upper()}",
            description=f"Serviço: {booking.procedure_name} - {booking.client_name}",
            amount=booking.price,
            date=booking.date,
            booking_id=booking.id,
            category_name=self._revenue_category,
        )
        await tx.insert_revenue_entry(entry)
        logger.info("Revenue %.2f posted for booking %s", entry.amount, booking.id)
