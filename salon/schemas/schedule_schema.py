"""Weekly schedule template model."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from salon.config import ScheduleDefaults
from salon.errors import InvalidConfiguration
from salon.utils import is_time_of_day, time_to_minutes

SUNDAY = 0


class ScheduleTemplate(BaseModel):
    """
    Recurring weekly template that slot generation is driven by.

    Weekdays use 0=Sunday .. 6=Saturday. Sunday is governed by the separate
    ``sunday_scheduling`` switch so the admin can open or close Sundays
    without touching the rest of the week.
    """

    active_weekdays: set[int] = Field(default_factory=lambda: {1, 2, 3, 4, 5, 6})
    sunday_scheduling: bool = False
    day_start: str = "08:00"
    day_end: str = "20:30"
    slot_interval: int = 30
    last_bookable_start: Optional[str] = "18:00"

    @field_validator("active_weekdays")
    @classmethod
    def _weekdays_in_range(cls, value: set[int]) -> set[int]:
        bad = sorted(d for d in value if not 0 <= d <= 6)
        if bad:
            raise ValueError(f"weekday numbers must be 0-6, got {bad}")
        return value

    @field_validator("day_start", "day_end", "last_bookable_start")
    @classmethod
    def _time_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_time_of_day(value):
            raise ValueError(f"expected HH:MM, got {value!r}")
        return value

    @classmethod
    def from_defaults(cls, defaults: ScheduleDefaults) -> "ScheduleTemplate":
        return cls(
            active_weekdays=set(defaults.weekdays),
            sunday_scheduling=defaults.sunday_scheduling,
            day_start=defaults.day_start,
            day_end=defaults.day_end,
            slot_interval=defaults.slot_interval,
            last_bookable_start=defaults.last_bookable_start,
        )

    @property
    def effective_weekdays(self) -> set[int]:
        """Weekdays on which bookings are accepted, Sunday switch applied."""
        if self.sunday_scheduling:
            return self.active_weekdays | {SUNDAY}
        return self.active_weekdays - {SUNDAY}

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.day_start)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.day_end)

    @property
    def latest_start_minutes(self) -> Optional[int]:
        if self.last_bookable_start is None:
            return None
        return time_to_minutes(self.last_bookable_start)

    def check(self) -> None:
        """Raise InvalidConfiguration if the template cannot produce a grid."""
        if self.slot_interval <= 0:
            raise InvalidConfiguration(
                f"slot_interval must be > 0, got {self.slot_interval}"
            )
        if self.start_minutes > self.end_minutes:
            raise InvalidConfiguration(
                f"day_start {self.day_start} is after day_end {self.day_end}"
            )
