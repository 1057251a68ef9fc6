"""
Centralized configuration with environment variable overrides.

Studio defaults, schedule template defaults, and booking policy values are
configurable here. The schedule template stored by the studio takes over once
it exists; these values only seed it on first read.
"""

import logging
import os
import re
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag ("1"/"true"/"yes"/"on" are truthy)."""
    raw = os.getenv(env_var, default)
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _safe_weekdays(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated weekday list (0=Sunday .. 6=Saturday)."""
    raw = os.getenv(env_var, default)
    try:
        days = tuple(sorted({int(part) for part in raw.split(",") if part.strip()}))
    except ValueError:
        raise ValueError(
            f"Invalid weekday list for {env_var}: {raw!r}"
        ) from None
    return days


@dataclass(frozen=True)
class StudioConfig:
    """Studio identity and bookkeeping labels."""

    name: str = os.getenv("STUDIO_NAME", "Studio de Cílios")
    revenue_category: str = os.getenv("REVENUE_CATEGORY", "Serviços Prestados")


@dataclass(frozen=True)
class ScheduleDefaults:
    """Values used to create the schedule template when none is stored yet."""

    weekdays: tuple[int, ...] = _safe_weekdays("SCHEDULE_WEEKDAYS", "1,2,3,4,5,6")
    sunday_scheduling: bool = _safe_bool("SCHEDULE_SUNDAY", "false")
    day_start: str = os.getenv("SCHEDULE_DAY_START", "08:00")
    day_end: str = os.getenv("SCHEDULE_DAY_END", "20:30")
    slot_interval: int = _safe_int("SCHEDULE_SLOT_INTERVAL", "30")
    last_bookable_start: str = os.getenv("SCHEDULE_LAST_BOOKABLE_START", "18:00")


@dataclass(frozen=True)
class BookingConfig:
    """Booking policy and store round-trip settings."""

    horizon_days: int = _safe_int("AVAILABILITY_HORIZON_DAYS", "60")
    maintenance_days: int = _safe_int("MAINTENANCE_DAYS", "21")
    store_timeout_sec: float = _safe_float("STORE_TIMEOUT_SEC", "5.0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    studio: StudioConfig = field(default_factory=StudioConfig)
    schedule: ScheduleDefaults = field(default_factory=ScheduleDefaults)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "salon-scheduler")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    schedule = config.schedule
    for day in schedule.weekdays:
        if not 0 <= day <= 6:
            raise ValueError(f"SCHEDULE_WEEKDAYS entries must be 0-6, got {day}")

    for name, value in [
        ("SCHEDULE_DAY_START", schedule.day_start),
        ("SCHEDULE_DAY_END", schedule.day_end),
        ("SCHEDULE_LAST_BOOKABLE_START", schedule.last_bookable_start),
    ]:
        if not _HHMM.match(value):
            raise ValueError(f"{name} must be HH:MM, got {value!r}")

    if schedule.day_start > schedule.day_end:
        raise ValueError(
            f"SCHEDULE_DAY_START must not be after SCHEDULE_DAY_END, "
            f"got {schedule.day_start} > {schedule.day_end}"
        )
    if schedule.slot_interval < 1:
        raise ValueError(
            f"SCHEDULE_SLOT_INTERVAL must be >= 1, got {schedule.slot_interval}"
        )
    if config.booking.horizon_days < 1:
        raise ValueError(
            f"AVAILABILITY_HORIZON_DAYS must be >= 1, got {config.booking.horizon_days}"
        )
    if config.booking.maintenance_days < 1:
        raise ValueError(
            f"MAINTENANCE_DAYS must be >= 1, got {config.booking.maintenance_days}"
        )
    if config.booking.store_timeout_sec <= 0:
        raise ValueError(
            f"STORE_TIMEOUT_SEC must be > 0, got {config.booking.store_timeout_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.studio.name)
    return config


# Singleton instance
settings = load_config()
