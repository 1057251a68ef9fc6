"""Tests for reminder, maintenance, and client lookup queries."""

from datetime import datetime, timezone

import pytest

from salon.errors import RecordNotFound
from salon.schemas.booking_schema import BookingStatus
from salon.services.follow_up import (
    birthdays_in_month,
    bookings_for_contact,
    clients,
    maintenance_due,
    mark_maintenance_reminder_sent,
    mark_reminder_sent,
    reminders_due,
)
from tests.conftest import TODAY, day, make_booking


def _seed(store, *bookings):
    for booking in bookings:
        store._bookings[booking.id] = booking


class TestBookingsForContact:
    @pytest.mark.asyncio
    async def test_matches_with_or_without_area_code(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-1", client_contact="+55 (11) 98765-4321"),
            make_booking(booking_id="BK-2", client_contact="11 91111-2222"),
        )
        found = await bookings_for_contact(store, "98765 4321")
        assert [b.id for b in found] == ["BK-1"]

    @pytest.mark.asyncio
    async def test_newest_first(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-OLD",
                         created_at=datetime(2026, 9, 1, tzinfo=timezone.utc)),
            make_booking(booking_id="BK-NEW", booking_date=day(2),
                         created_at=datetime(2026, 10, 10, tzinfo=timezone.utc)),
        )
        found = await bookings_for_contact(store, "(11) 98765-4321")
        assert [b.id for b in found] == ["BK-NEW", "BK-OLD"]

    @pytest.mark.asyncio
    async def test_empty_query_matches_nothing(self, store):
        _seed(store, make_booking(booking_id="BK-1"))
        assert await bookings_for_contact(store, "---") == []


class TestClientDirectory:
    @pytest.mark.asyncio
    async def test_one_entry_per_contact(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-OLD", client_name="Ana S.",
                         client_contact="11 98765-4321",
                         created_at=datetime(2026, 9, 1, tzinfo=timezone.utc)),
            make_booking(booking_id="BK-NEW", booking_date=day(2), client_name="Ana Souza",
                         client_contact="(11) 98765-4321",
                         created_at=datetime(2026, 10, 10, tzinfo=timezone.utc)),
            make_booking(booking_id="BK-BIA", client_name="Bia", client_contact="11 91111-2222",
                         created_at=datetime(2026, 8, 1, tzinfo=timezone.utc)),
        )
        directory = await clients(store)
        assert [c.name for c in directory] == ["Ana Souza", "Bia"]
        assert directory[0].contact == "(11) 98765-4321"

    @pytest.mark.asyncio
    async def test_birth_date_from_older_booking_kept(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-OLD", client_birth_date="1990-10-25",
                         created_at=datetime(2026, 9, 1, tzinfo=timezone.utc)),
            make_booking(booking_id="BK-NEW", booking_date=day(2),
                         created_at=datetime(2026, 10, 10, tzinfo=timezone.utc)),
        )
        directory = await clients(store)
        assert len(directory) == 1
        assert directory[0].birth_date == "1990-10-25"

    @pytest.mark.asyncio
    async def test_birthdays_in_month_sorted_by_day(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-1", client_name="Carla", client_contact="11 93333-0000",
                         client_birth_date="1985-10-30"),
            make_booking(booking_id="BK-2", client_name="Bia", client_contact="11 92222-0000",
                         client_birth_date="1999-10-02"),
            make_booking(booking_id="BK-3", client_name="Dani", client_contact="11 94444-0000",
                         client_birth_date="1992-11-02"),
            make_booking(booking_id="BK-4", client_name="Eva", client_contact="11 95555-0000"),
        )
        born = await birthdays_in_month(store, TODAY)
        assert [c.name for c in born] == ["Bia", "Carla"]


class TestReminders:
    @pytest.mark.asyncio
    async def test_tomorrow_confirmed_unreminded(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-LATE", booking_date=day(1), start_time="15:00"),
            make_booking(booking_id="BK-EARLY", booking_date=day(1), start_time="09:00"),
            make_booking(booking_id="BK-PEND", booking_date=day(1), status=BookingStatus.PENDING),
            make_booking(booking_id="BK-TODAY", booking_date=day(0)),
        )
        due = await reminders_due(store, TODAY)
        assert [b.id for b in due] == ["BK-EARLY", "BK-LATE"]

    @pytest.mark.asyncio
    async def test_marked_bookings_drop_out(self, store):
        _seed(store, make_booking(booking_id="BK-1", booking_date=day(1)))
        marked = await mark_reminder_sent(store, "BK-1")
        assert marked.reminder_sent
        assert await reminders_due(store, TODAY) == []

    @pytest.mark.asyncio
    async def test_mark_unknown(self, store):
        with pytest.raises(RecordNotFound):
            await mark_reminder_sent(store, "BK-NOPE")


class TestMaintenance:
    @pytest.mark.asyncio
    async def test_due_after_period(self, store):
        _seed(
            store,
            make_booking(booking_id="BK-DUE", booking_date="2026-09-28",
                         status=BookingStatus.COMPLETED),
            make_booking(booking_id="BK-RECENT", booking_date="2026-10-10",
                         status=BookingStatus.COMPLETED),
            make_booking(booking_id="BK-CONF", booking_date="2026-09-01"),
        )
        due = await maintenance_due(store, TODAY, days=21)
        assert [b.id for b in due] == ["BK-DUE"]

    @pytest.mark.asyncio
    async def test_default_period_from_config(self, store):
        _seed(store, make_booking(booking_id="BK-1", booking_date="2026-09-28",
                                  status=BookingStatus.COMPLETED))
        assert [b.id for b in await maintenance_due(store, TODAY)] == ["BK-1"]

    @pytest.mark.asyncio
    async def test_marked_bookings_drop_out(self, store):
        _seed(store, make_booking(booking_id="BK-1", booking_date="2026-09-01",
                                  status=BookingStatus.COMPLETED))
        await mark_maintenance_reminder_sent(store, "BK-1")
        assert await maintenance_due(store, TODAY, days=21) == []

    @pytest.mark.asyncio
    async def test_non_positive_period_rejected(self, store):
        with pytest.raises(ValueError):
            await maintenance_due(store, TODAY, days=0)
