from salon.scheduling.availability import compute_availability, day_free_slots
from salon.scheduling.conflict_guard import check_slot_free, try_reschedule, try_reserve
from salon.scheduling.lifecycle import BookingLifecycle, StatusTransition
from salon.scheduling.occupancy import Interval, filter_available, find_conflict
from salon.scheduling.time_grid import generate_slots

__all__ = [
    "generate_slots",
    "Interval",
    "filter_available",
    "find_conflict",
    "compute_availability",
    "day_free_slots",
    "check_slot_free",
    "try_reserve",
    "try_reschedule",
    "BookingLifecycle",
    "StatusTransition",
]
