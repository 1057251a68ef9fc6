"""
Occupancy calculation: which candidate starts are still free on a day.

All arithmetic is on integer minutes since midnight with half-open
intervals, so a booking ending at 10:00 and one starting at 10:00 touch
without overlapping.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from salon.schemas.booking_schema import Booking
from salon.utils import time_to_minutes


@dataclass(frozen=True)
class Interval:
    """Half-open time range ``[start, end)`` in minutes since midnight."""
    start: int
    end: int

    @classmethod
    def starting_at(cls, start: int, duration: int) -> "Interval":
        return cls(start, start + duration)

    @classmethod
    def for_booking(cls, booking: Booking) -> "Interval":
        # Snapshot duration, never the procedure's current one.
        return cls.starting_at(time_to_minutes(booking.start_time), booking.duration_minutes)

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, minute: int) -> bool:
        return self.start <= minute < self.end


def occupied_intervals(
    bookings: Iterable[Booking], exclude_id: Optional[str] = None
) -> list[tuple[Booking, Interval]]:
    """Pair every occupying booking with the interval it blocks."""
    return [
        (b, Interval.for_booking(b))
        for b in bookings
        if b.is_occupying and b.id != exclude_id
    ]


def find_conflict(
    start: int,
    duration: int,
    bookings: Iterable[Booking],
    exclude_id: Optional[str] = None,
) -> Optional[Booking]:
    """Return the first occupying booking that overlaps ``[start, start+duration)``."""
    wanted = Interval.starting_at(start, duration)
    for booking, interval in occupied_intervals(bookings, exclude_id):
        if wanted.overlaps(interval):
            return booking
    return None


def filter_available(
    candidates: Iterable[int],
    closing_time: int,
    duration: int,
    bookings: Iterable[Booking],
    latest_start: Optional[int] = None,
) -> list[int]:
    """
    Keep the candidate starts where a ``duration``-minute procedure fits.

    A start survives when the procedure ends by ``closing_time``, the start is
    not after ``latest_start`` (if set), and its interval overlaps no
    occupying booking. Input order is preserved.
    """
    blocked = [interval for _, interval in occupied_intervals(bookings)]
    free: list[int] = []
    for start in candidates:
        if start + duration > closing_time:
            continue
        if latest_start is not None and start > latest_start:
            continue
        wanted = Interval.starting_at(start, duration)
        if any(wanted.overlaps(interval) for interval in blocked):
            continue
        free.append(start)
    return free


def filter_unblocked(candidates: Iterable[int], bookings: Iterable[Booking]) -> list[int]:
    """Drop candidate starts that fall inside an occupied interval.

    Duration-agnostic pass used before a procedure has been chosen.
    """
    blocked = [interval for _, interval in occupied_intervals(bookings)]
    return [s for s in candidates if not any(i.contains(s) for i in blocked)]
