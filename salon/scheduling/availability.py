"""
Availability index: free start times per date over a rolling horizon.

Two query shapes are supported:
- duration-agnostic (``duration=None``): the day grid minus starts that fall
  inside an occupied interval. This is what the booking calendar shows
  before a procedure is picked.
- procedure-keyed (``duration=N``): the full fit + occupancy filter for a
  procedure of N minutes.

The result is recomputed from scratch on every call.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from salon.schemas.booking_schema import Booking
from salon.schemas.schedule_schema import ScheduleTemplate
from salon.scheduling.occupancy import filter_available, filter_unblocked
from salon.scheduling.time_grid import generate_slots
from salon.utils import minutes_to_time, sunday_based_weekday

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 60


def day_free_slots(
    template: ScheduleTemplate,
    bookings_for_day: Iterable[Booking],
    duration: Optional[int] = None,
) -> list[int]:
    """Free start minutes for one active day."""
    template.check()
    grid = generate_slots(template.start_minutes, template.end_minutes, template.slot_interval)
    if duration is None:
        return filter_unblocked(grid, bookings_for_day)
    return filter_available(
        grid,
        closing_time=template.end_minutes,
        duration=duration,
        bookings=bookings_for_day,
        latest_start=template.latest_start_minutes,
    )


def compute_availability(
    template: ScheduleTemplate,
    bookings: Iterable[Booking],
    today: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    duration: Optional[int] = None,
) -> dict[str, list[str]]:
    """
    Map each active date in ``[today, today + horizon_days)`` to its free starts.

    Dates on inactive weekdays are absent from the mapping. Active dates with
    every start taken are present with an empty list.

    Raises:
        InvalidConfiguration: If the template cannot produce a grid.
    """
    template.check()
    weekdays = template.effective_weekdays

    by_date: dict[str, list[Booking]] = {}
    for booking in bookings:
        if booking.is_occupying:
            by_date.setdefault(booking.date, []).append(booking)

    availability: dict[str, list[str]] = {}
    for offset in range(horizon_days):
        day = today + timedelta(days=offset)
        if sunday_based_weekday(day) not in weekdays:
            continue
        key = day.isoformat()
        free = day_free_slots(template, by_date.get(key, []), duration)
        availability[key] = [minutes_to_time(m) for m in free]

    logger.debug(
        "Availability computed: %d active days from %s (duration=%s)",
        len(availability), today.isoformat(), duration,
    )
    return availability
