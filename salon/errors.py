"""Error taxonomy for the scheduling core.

Callers branch on the class to decide between re-fetching availability and
retrying (``SlotConflict``), backing off (``StoreUnavailable``), or showing a
terminal error (everything else).
"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for all scheduling failures."""

    retryable: bool = False


class InvalidConfiguration(SchedulingError):
    """The schedule template is malformed (non-positive interval, inverted bounds)."""


class SlotConflict(SchedulingError):
    """The requested interval overlaps an occupying booking."""

    retryable = True

    def __init__(
        self,
        date: str,
        start_time: str,
        conflicting_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.date = date
        self.start_time = start_time
        self.conflicting_id = conflicting_id
        super().__init__(
            message or f"Slot {date} {start_time} overlaps an existing booking."
        )


class InvalidTransition(SchedulingError):
    """A status change outside the allowed lifecycle transitions."""

    def __init__(self, booking_id: str, from_status: str, to_status: str) -> None:
        self.booking_id = booking_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Booking {booking_id} cannot move from '{from_status}' to '{to_status}'."
        )


class StoreUnavailable(SchedulingError):
    """Transport or persistence failure. Nothing was committed."""

    retryable = True


class RecordNotFound(SchedulingError):
    """A booking or procedure id does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind.capitalize()} {record_id} not found.")
