# backend/studio_booking/services/slots/config.py
"""
Booking configuration for slots calculation.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from ...config import settings
from .timeutils import as_utc


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the slots engine.

    Attributes:
        slot_step_minutes: Grid resolution (the engine works in quarters)
        default_timezone: Timezone for staff without settings
        default_buffer_minutes: Buffer for staff without settings
        default_calendar_start_hour: First grid hour (inclusive)
        default_calendar_end_hour: Last grid hour (exclusive)
    """
    slot_step_minutes: int = 15
    default_timezone: str = "Asia/Shanghai"
    default_buffer_minutes: int = 0
    default_calendar_start_hour: int = 8
    default_calendar_end_hour: int = 22

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes != 15:
            raise ValueError(f"slot_step_minutes must be 15, got {self.slot_step_minutes}")
        if not 0 <= self.default_calendar_start_hour < self.default_calendar_end_hour <= 24:
            raise ValueError(
                "default calendar hours must satisfy 0 <= start < end <= 24, got "
                f"{self.default_calendar_start_hour}-{self.default_calendar_end_hour}"
            )

    @property
    def quarters_per_hour(self) -> int:
        return 60 // self.slot_step_minutes


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton), seeded from application settings."""
    return BookingConfig(
        default_timezone=settings.default_timezone,
        default_buffer_minutes=settings.default_buffer_minutes,
        default_calendar_start_hour=settings.default_calendar_start_hour,
        default_calendar_end_hour=settings.default_calendar_end_hour,
    )


@dataclass(frozen=True)
class StaffSchedule:
    """Default-filled view of a staff settings record, as the engine sees it."""
    timezone: str
    buffer_minutes: int
    calendar_start_hour: int
    calendar_end_hour: int
    open_until: datetime | None = None

    @classmethod
    def from_record(cls, record, config: BookingConfig | None = None) -> "StaffSchedule":
        """Build from a StaffSettings row (or None → all defaults)."""
        config = config or get_booking_config()
        if record is None:
            return cls(
                timezone=config.default_timezone,
                buffer_minutes=config.default_buffer_minutes,
                calendar_start_hour=config.default_calendar_start_hour,
                calendar_end_hour=config.default_calendar_end_hour,
            )

        def pick(value, default):
            return default if value is None else value

        open_until = record.open_until
        return cls(
            timezone=record.timezone or config.default_timezone,
            buffer_minutes=pick(record.buffer_minutes, config.default_buffer_minutes),
            calendar_start_hour=pick(record.calendar_start_hour, config.default_calendar_start_hour),
            calendar_end_hour=pick(record.calendar_end_hour, config.default_calendar_end_hour),
            open_until=as_utc(open_until) if open_until is not None else None,
        )
