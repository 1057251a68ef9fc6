"""Shared utilities: time-of-day arithmetic, ISO dates, and contact normalization."""

import re
from datetime import date

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight.

    Examples:
        >>> time_to_minutes("08:00")
        480
        >>> time_to_minutes("20:30")
        1230
    """
    match = _HHMM.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to an ``HH:MM`` string."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range for a time of day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_time_of_day(value: str) -> bool:
    return bool(_HHMM.match(value))


def parse_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` calendar date."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def sunday_based_weekday(day: date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def normalize_contact(value: str) -> str:
    """Strip everything except digits from a phone-like contact.

    Examples:
        >>> normalize_contact("(11) 98765-4321")
        '11987654321'
        >>> normalize_contact("+55 11 98765 4321")
        '5511987654321'
    """
    return re.sub(r"\D", "", value)
