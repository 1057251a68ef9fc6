"""Tests for candidate slot generation."""

import pytest

from salon.errors import InvalidConfiguration
from salon.scheduling.time_grid import generate_slots
from salon.utils import minutes_to_time, time_to_minutes


def _grid(start: str, end: str, interval: int) -> list[str]:
    slots = generate_slots(time_to_minutes(start), time_to_minutes(end), interval)
    return [minutes_to_time(m) for m in slots]


class TestGenerateSlots:
    def test_default_studio_day(self):
        slots = _grid("08:00", "20:30", 30)
        assert slots[0] == "08:00"
        assert slots[-1] == "20:30"
        assert len(slots) == 26

    def test_end_bound_is_inclusive(self):
        assert _grid("09:00", "10:00", 30) == ["09:00", "09:30", "10:00"]

    def test_end_not_on_grid_is_not_generated(self):
        assert _grid("09:00", "10:10", 30) == ["09:00", "09:30", "10:00"]

    def test_start_equal_to_end_gives_one_slot(self):
        assert _grid("12:00", "12:00", 15) == ["12:00"]

    def test_slots_are_chronological(self):
        slots = generate_slots(480, 1230, 45)
        assert slots == sorted(slots)
        assert all(b - a == 45 for a, b in zip(slots, slots[1:]))

    def test_deterministic(self):
        assert generate_slots(480, 600, 20) == generate_slots(480, 600, 20)


class TestInvalidGrid:
    def test_zero_interval_rejected(self):
        with pytest.raises(InvalidConfiguration, match="positive"):
            generate_slots(480, 1230, 0)

    def test_negative_interval_rejected(self):
        with pytest.raises(InvalidConfiguration):
            generate_slots(480, 1230, -30)

    def test_inverted_bounds_rejected(self):
        with pytest.raises(InvalidConfiguration, match="after day end"):
            generate_slots(1230, 480, 30)
