# backend/studio_booking/services/slots/timeutils.py
"""
Time helpers for the slots engine.

Two representations are used everywhere:
- wall-clock minutes of a day (0..1440) for schedule rules ("HH:MM")
- timezone-aware UTC instants for appointments and cut-offs

Conversion between them always goes through the staff's IANA timezone
(pytz localize + normalize), so DST transitions are handled by the
tz database, not by offset arithmetic.
"""

from datetime import date, datetime, time, timedelta

import pytz


MINUTES_PER_DAY = 24 * 60
CELL_ID_SEPARATOR = "|"


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_quarter_aligned(value: str) -> bool:
    """True when the minute part of "HH:MM" is a multiple of 15."""
    _, _, minutes = value.partition(":")
    return int(minutes or 0) % 15 == 0


def day_of_week(target: date) -> int:
    """Day-of-week with Sunday = 0 ... Saturday = 6."""
    return (target.weekday() + 1) % 7


def get_tz(name: str) -> pytz.BaseTzInfo:
    return pytz.timezone(name)


def is_valid_timezone(name: str) -> bool:
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return False
    return True


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def as_utc(value: datetime) -> datetime:
    """
    Return an aware UTC datetime.

    Naive values are the storage format (naive UTC) and are tagged as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.UTC)
    return value.astimezone(pytz.UTC)


def to_db_utc(value: datetime) -> datetime:
    """Naive UTC datetime for the DateTime columns."""
    return as_utc(value).replace(tzinfo=None)


def local_to_utc(target: date, minutes: int, tz_name: str) -> datetime:
    """
    Wall-clock time `minutes` after local midnight of `target` → UTC instant.

    Wall times inside a DST gap are normalized forward by the tz database.
    """
    tz = get_tz(tz_name)
    naive = datetime.combine(target, time()) + timedelta(minutes=minutes)
    local = tz.normalize(tz.localize(naive))
    return local.astimezone(pytz.UTC)


def utc_to_local(value: datetime, tz_name: str) -> datetime:
    """Instant → aware datetime in the staff's timezone."""
    return as_utc(value).astimezone(get_tz(tz_name))


def minutes_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def make_cell_id(cell_date: date | str, hour: int, quarter: int) -> str:
    """Encode a grid cell as "YYYY-MM-DD|hour|quarter"."""
    if isinstance(cell_date, date):
        cell_date = cell_date.isoformat()
    return f"{cell_date}{CELL_ID_SEPARATOR}{hour}{CELL_ID_SEPARATOR}{quarter}"

