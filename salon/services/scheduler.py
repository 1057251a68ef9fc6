"""
Studio scheduler: the entry point booking screens and admin tools call.

Loads the schedule template, procedures, and bookings from the store once per
operation and hands them to the pure scheduling functions, then routes every
calendar write through the conflict guard or the booking lifecycle.
"""

import uuid
from datetime import date
from typing import Callable, Optional, Union

from salon.config import AppConfig, settings
from salon.errors import RecordNotFound
from salon.logging_context import get_request_logger
from salon.schemas.booking_schema import Booking, BookingStatus, ClientInfo
from salon.schemas.procedure_schema import Procedure
from salon.schemas.schedule_schema import ScheduleTemplate
from salon.scheduling.availability import compute_availability, day_free_slots
from salon.scheduling.conflict_guard import try_reschedule, try_reserve
from salon.scheduling.lifecycle import BookingLifecycle
from salon.services.catalog import get_procedure
from salon.store.base import BookingStore, Transaction
from salon.utils import is_time_of_day, minutes_to_time, parse_date, sunday_based_weekday

logger = get_request_logger(__name__)


def _new_booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:6].upper()}"


def _require_time_of_day(value: str) -> None:
    if not is_time_of_day(value):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")


class StudioScheduler:
    """Availability queries and booking mutations for a single-provider studio."""

    def __init__(
        self,
        store: BookingStore,
        config: Optional[AppConfig] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._config = config or settings
        self._clock = clock
        self._lifecycle = BookingLifecycle(self._config.studio.revenue_category)

    @property
    def store(self) -> BookingStore:
        return self._store

    @property
    def lifecycle(self) -> BookingLifecycle:
        return self._lifecycle

    # ------------------------------------------------------------------ #
    # Availability
    # ------------------------------------------------------------------ #

    async def get_availability(
        self,
        horizon_days: Optional[int] = None,
        procedure_id: Optional[str] = None,
    ) -> dict[str, list[str]]:
        """
        Free start times per date, ``{"YYYY-MM-DD": ["HH:MM", ...]}``.

        Without ``procedure_id`` the grid is duration-agnostic; with it, only
        starts where that procedure fits are returned.

        Raises:
            InvalidConfiguration: If the stored template is malformed.
            RecordNotFound: If ``procedure_id`` is unknown.
        """
        horizon = horizon_days if horizon_days is not None else self._config.booking.horizon_days
        if horizon < 1:
            raise ValueError(f"horizon_days must be >= 1, got {horizon}")

        template = await self._store.read_schedule_template()
        duration = None
        if procedure_id is not None:
            duration = (await get_procedure(self._store, procedure_id)).duration_minutes
        bookings = await self._store.read_bookings()
        return compute_availability(template, bookings, self._clock(), horizon, duration)

    async def available_times(self, booking_date: str, procedure_id: str) -> list[str]:
        """Start times on ``booking_date`` where the procedure fits.

        Returns an empty list for inactive weekdays.
        """
        day = parse_date(booking_date)
        template = await self._store.read_schedule_template()
        if sunday_based_weekday(day) not in template.effective_weekdays:
            return []
        procedure = await get_procedure(self._store, procedure_id)
        bookings = await self._store.read_bookings(date=booking_date)
        free = day_free_slots(template, bookings, procedure.duration_minutes)
        return [minutes_to_time(m) for m in free]

    # ------------------------------------------------------------------ #
    # Reservations
    # ------------------------------------------------------------------ #

    async def reserve(
        self,
        booking_date: str,
        start_time: str,
        procedure_id: str,
        client: ClientInfo,
        admin: bool = False,
    ) -> Booking:
        """
        Book ``procedure_id`` at ``booking_date`` ``start_time``.

        Client self-service bookings start ``pending``; admin-entered bookings
        start ``confirmed``.

        Raises:
            SlotConflict: If the interval overlaps an occupying booking.
            RecordNotFound: If the procedure does not exist.
            StoreUnavailable: On store failure; nothing is written.
        """
        parse_date(booking_date)
        _require_time_of_day(start_time)
        procedure = await get_procedure(self._store, procedure_id)

        booking = Booking(
            id=_new_booking_id(),
            procedure_id=procedure.id,
            procedure_name=procedure.name,
            price=procedure.price,
            duration_minutes=procedure.duration_minutes,
            date=booking_date,
            start_time=start_time,
            client_name=client.name.strip(),
            client_contact=client.contact.strip(),
            client_birth_date=client.birth_date,
            status=BookingStatus.CONFIRMED if admin else BookingStatus.PENDING,
        )
        return await try_reserve(self._store, booking)

    async def edit_reservation(
        self,
        booking_id: str,
        new_date: str,
        new_time: str,
        new_procedure_id: Optional[str] = None,
    ) -> Booking:
        """
        Move a booking and optionally switch its procedure.

        Switching procedure refreshes the name/price/duration snapshot. The
        booking returns to ``pending`` for re-confirmation.

        Raises:
            SlotConflict: If the new date/time overlaps an occupying booking.
            InvalidTransition: If the booking is cancelled or completed.
            RecordNotFound: If the booking or new procedure does not exist.
        """
        parse_date(new_date)
        _require_time_of_day(new_time)
        fields = {}
        if new_procedure_id is not None:
            fields = self._snapshot(await get_procedure(self._store, new_procedure_id))
        return await try_reschedule(self._store, booking_id, new_date, new_time, fields)

    async def set_status(
        self, booking_id: str, new_status: Union[BookingStatus, str]
    ) -> Booking:
        """
        Apply a lifecycle transition.

        Raises:
            InvalidTransition: If the change is not allowed from the current status.
            SlotConflict: If confirming would double-book.
            RecordNotFound: If the booking does not exist.
        """
        return await self._lifecycle.apply(self._store, booking_id, BookingStatus(new_status))

    async def cancel(self, booking_id: str) -> Booking:
        """Cancel a booking, keeping it in history and freeing its interval."""
        return await self.set_status(booking_id, BookingStatus.CANCELLED)

    async def discard(self, booking_id: str) -> None:
        """Hard-delete a booking. Frees its interval like a cancellation."""

        async def _discard(tx: Transaction) -> None:
            await tx.delete_booking(booking_id)

        await self._store.run_atomic(_discard)
        logger.info("Booking %s discarded", booking_id)

    async def get_booking(self, booking_id: str) -> Booking:
        booking = await self._store.read_booking(booking_id)
        if booking is None:
            raise RecordNotFound("booking", booking_id)
        return booking

    # ------------------------------------------------------------------ #
    # Schedule template administration
    # ------------------------------------------------------------------ #

    async def get_schedule_template(self) -> ScheduleTemplate:
        return await self._store.read_schedule_template()

    async def update_schedule_template(self, template: ScheduleTemplate) -> ScheduleTemplate:
        """Validate and store a new template.

        Raises:
            InvalidConfiguration: If the template cannot produce a grid.
        """
        template.check()
        await self._store.write_schedule_template(template)
        logger.info(
            "Schedule template set: weekdays=%s %s-%s every %d min",
            sorted(template.effective_weekdays), template.day_start, template.day_end,
            template.slot_interval,
        )
        return template

    async def set_sunday_scheduling(self, enabled: bool) -> ScheduleTemplate:
        """Open or close Sundays without touching the rest of the template."""
        template = await self._store.read_schedule_template()
        template.sunday_scheduling = enabled
        return await self.update_schedule_template(template)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _snapshot(procedure: Procedure) -> dict:
        return {
            "procedure_id": procedure.id,
            "procedure_name": procedure.name,
            "price": procedure.price,
            "duration_minutes": procedure.duration_minutes,
        }
