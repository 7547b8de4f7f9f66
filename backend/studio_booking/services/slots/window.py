# backend/studio_booking/services/slots/window.py
"""
Appointment window validation against working hours.

A window [start, end) is accepted only if:
- it lies on a single local calendar day of the staff's timezone
  (anything ending on the next local day, including exactly 00:00, is rejected)
- every 15-minute boundary in it is covered by an AVAILABLE or
  PENDING_CONFIRM rule

Occupancy is NOT checked here (see conflict.py).
"""

import logging
from datetime import datetime
from typing import Iterable

from sqlalchemy.orm import Session

from .config import BookingConfig, StaffSchedule, get_booking_config
from .rules import is_bookable, rules_for_day
from .store import get_schedule_rules, get_staff_schedule
from .timeutils import as_utc, day_of_week, minutes_of_day, minutes_to_time_str, utc_to_local

logger = logging.getLogger(__name__)


def is_window_within_rules(
    schedule: StaffSchedule,
    rules: Iterable,
    start_time: datetime,
    end_time: datetime,
    config: BookingConfig | None = None,
) -> bool:
    """Pure check over an already-loaded snapshot."""
    config = config or get_booking_config()

    if as_utc(end_time) <= as_utc(start_time):
        return False

    start_local = utc_to_local(start_time, schedule.timezone)
    end_local = utc_to_local(end_time, schedule.timezone)

    # Same-day appointments only
    if start_local.date() != end_local.date():
        return False

    dow = day_of_week(start_local.date())
    day_rules = rules_for_day(rules, dow)

    start_min = minutes_of_day(start_local)
    end_min = minutes_of_day(end_local)

    for minute in range(start_min, end_min, config.slot_step_minutes):
        if not is_bookable(day_rules, dow, minute):
            logger.debug(f"Local {minutes_to_time_str(minute)} on day {dow} is not bookable ({schedule.timezone})")
            return False
    return True


def validate_appointment_window(
    db: Session,
    staff_id: int,
    start_time: datetime,
    end_time: datetime,
    config: BookingConfig | None = None,
) -> bool:
    """Load the staff snapshot and validate [start_time, end_time)."""
    schedule = get_staff_schedule(db, staff_id, config)
    rules = get_schedule_rules(db, staff_id)

    ok = is_window_within_rules(schedule, rules, start_time, end_time, config)
    if not ok:
        logger.info(
            f"Window rejected for staff {staff_id}: "
            f"{as_utc(start_time).isoformat()} – {as_utc(end_time).isoformat()} ({schedule.timezone})"
        )
    return ok
