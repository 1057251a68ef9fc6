"""
Client follow-up queries.

Finds bookings that need a day-before reminder or a maintenance nudge, builds
the client directory and its birthdays-of-the-month view, and looks up a
client's bookings by contact. Message text and delivery are
handled by whoever consumes these lists.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from salon.config import settings
from salon.schemas.booking_schema import Booking, BookingStatus, ClientInfo
from salon.store.base import BookingStore
from salon.utils import normalize_contact, parse_date

logger = logging.getLogger(__name__)


async def bookings_for_contact(store: BookingStore, contact: str) -> list[Booking]:
    """Bookings whose contact digits end with the digits of ``contact``, newest first.

    Suffix matching lets a client find their bookings with or without the
    country or area code.
    """
    wanted = normalize_contact(contact)
    if not wanted:
        return []
    bookings = await store.read_bookings()
    return [
        b for b in bookings
        if b.client_contact and normalize_contact(b.client_contact).endswith(wanted)
    ]


async def clients(store: BookingStore) -> list[ClientInfo]:
    """One entry per client, built from booking history, most recent client first.

    Clients are keyed by normalised contact. Name and contact come from the
    latest booking; the birth date is the latest one recorded for that contact.
    Bookings without contact digits are skipped.
    """
    directory: dict[str, ClientInfo] = {}
    for booking in await store.read_bookings():
        key = normalize_contact(booking.client_contact)
        if not key:
            continue
        known = directory.get(key)
        if known is None:
            directory[key] = ClientInfo(
                name=booking.client_name or "Sem nome",
                contact=booking.client_contact,
                birth_date=booking.client_birth_date,
            )
        elif known.birth_date is None and booking.client_birth_date:
            known.birth_date = booking.client_birth_date
    return list(directory.values())


async def birthdays_in_month(store: BookingStore, today: date) -> list[ClientInfo]:
    """Clients whose birthday falls in ``today``'s month, ordered by day of month."""
    born_this_month = [
        c for c in await clients(store)
        if c.birth_date and parse_date(c.birth_date).month == today.month
    ]
    return sorted(born_this_month, key=lambda c: parse_date(c.birth_date).day)


async def reminders_due(store: BookingStore, today: date) -> list[Booking]:
    """Confirmed bookings for tomorrow that have not been reminded yet."""
    tomorrow = (today + timedelta(days=1)).isoformat()
    bookings = await store.read_bookings(date=tomorrow, statuses=[BookingStatus.CONFIRMED])
    due = [b for b in bookings if not b.reminder_sent]
    return sorted(due, key=lambda b: b.start_time)


async def mark_reminder_sent(store: BookingStore, booking_id: str) -> Booking:
    booking = await store.update_booking_fields(booking_id, {"reminder_sent": True})
    logger.info("Reminder marked as sent for %s", booking_id)
    return booking


async def maintenance_due(
    store: BookingStore, today: date, days: Optional[int] = None
) -> list[Booking]:
    """Completed bookings whose maintenance period has elapsed without a nudge.

    Args:
        days: Maintenance period; defaults to the configured MAINTENANCE_DAYS.
    """
    period = days if days is not None else settings.booking.maintenance_days
    if period <= 0:
        raise ValueError(f"Maintenance period must be positive, got {period}")
    completed = await store.read_bookings(statuses=[BookingStatus.COMPLETED])
    due = [
        b for b in completed
        if not b.maintenance_reminder_sent
        and parse_date(b.date) + timedelta(days=period) <= today
    ]
    return sorted(due, key=lambda b: (b.date, b.start_time))


async def mark_maintenance_reminder_sent(store: BookingStore, booking_id: str) -> Booking:
    booking = await store.update_booking_fields(booking_id, {"maintenance_reminder_sent": True})
    logger.info("Maintenance reminder marked as sent for %s", booking_id)
    return booking
