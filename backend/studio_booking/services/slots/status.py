# backend/studio_booking/services/slots/status.py
"""
Initial status of a new appointment.

Only the rule classification at the local start minute is consulted:
PENDING_CONFIRM → PENDING, anything else → CONFIRMED. A window that starts
in an AVAILABLE period and runs into a PENDING_CONFIRM period is CONFIRMED.
"""

from datetime import datetime
from typing import Iterable

from ...models.enums import AppointmentStatus, SlotType
from .config import StaffSchedule
from .rules import resolve_slot_type
from .timeutils import day_of_week, minutes_of_day, utc_to_local


def resolve_booking_status(
    schedule: StaffSchedule,
    rules: Iterable,
    start_time: datetime,
) -> AppointmentStatus:
    start_local = utc_to_local(start_time, schedule.timezone)
    slot_type = resolve_slot_type(
        rules,
        day_of_week(start_local.date()),
        minutes_of_day(start_local),
    )
    if slot_type == SlotType.PENDING_CONFIRM:
        return AppointmentStatus.PENDING
    return AppointmentStatus.CONFIRMED
