"""Tests for model validation."""

import pytest
from pydantic import ValidationError

from salon.errors import InvalidConfiguration
from salon.schemas.booking_schema import BookingStatus, ClientInfo
from salon.schemas.schedule_schema import ScheduleTemplate
from tests.conftest import make_booking


class TestScheduleTemplate:
    def test_sunday_switch_adds_sunday(self):
        template = ScheduleTemplate(active_weekdays={1, 2}, sunday_scheduling=True)
        assert template.effective_weekdays == {0, 1, 2}

    def test_sunday_switch_off_removes_sunday(self):
        template = ScheduleTemplate(active_weekdays={0, 1}, sunday_scheduling=False)
        assert template.effective_weekdays == {1}

    def test_weekday_out_of_range(self):
        with pytest.raises(ValidationError):
            ScheduleTemplate(active_weekdays={7})

    def test_time_format(self):
        with pytest.raises(ValidationError):
            ScheduleTemplate(day_start="8:00")

    def test_no_latest_start(self):
        assert ScheduleTemplate(last_bookable_start=None).latest_start_minutes is None

    def test_check_rejects_inverted_bounds(self):
        with pytest.raises(InvalidConfiguration):
            ScheduleTemplate(day_start="12:00", day_end="09:00").check()


class TestBooking:
    def test_defaults(self):
        booking = make_booking()
        assert booking.is_occupying
        assert not booking.reminder_sent
        assert booking.updated_at is None

    def test_pending_does_not_occupy(self):
        assert not make_booking(status=BookingStatus.PENDING).is_occupying

    def test_rejects_bad_time(self):
        with pytest.raises(ValidationError):
            make_booking(start_time="25:00")

    def test_rejects_bad_date(self):
        with pytest.raises(ValidationError):
            make_booking(booking_date="2026-13-01")

    def test_rejects_zero_duration(self):
        with pytest.raises(ValidationError):
            make_booking(duration=0)

    def test_birth_date_must_be_iso(self):
        with pytest.raises(ValidationError):
            make_booking(client_birth_date="15/03/1990")

    def test_blank_birth_date_is_none(self):
        assert make_booking(client_birth_date="").client_birth_date is None


class TestClientInfo:
    def test_valid_birth_date(self):
        client = ClientInfo(name="Ana", contact="11 98765-4321", birth_date="1990-03-15")
        assert client.birth_date == "1990-03-15"

    def test_rejects_malformed_birth_date(self):
        with pytest.raises(ValidationError):
            ClientInfo(name="Ana", contact="11 98765-4321", birth_date="1990-02-30")
