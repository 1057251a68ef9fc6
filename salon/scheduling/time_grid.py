"""Candidate start times for one day of the weekly template."""

from salon.errors import InvalidConfiguration


def generate_slots(day_start: int, day_end: int, interval_minutes: int) -> list[int]:
    """
    Produce every ``day_start + k * interval_minutes`` that is ``<= day_end``.

    Times are minutes since midnight. The end bound is inclusive: a slot at
    exactly ``day_end`` is generated and later dropped by the fit filter if no
    procedure can finish by closing.

    Raises:
        InvalidConfiguration: If the interval is not positive or the bounds are inverted.
    """
    if interval_minutes <= 0:
        raise InvalidConfiguration(
            f"Slot interval must be positive, got {interval_minutes}"
        )
    if day_start > day_end:
        raise InvalidConfiguration(
            f"Day start ({day_start} min) is after day end ({day_end} min)"
        )
    return list(range(day_start, day_end + 1, interval_minutes))
