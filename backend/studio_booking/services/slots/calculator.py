# backend/studio_booking/services/slots/calculator.py
"""
Weekly slot grid for a staff member.

Produces one cell per (day, hour, quarter) over
[calendar_start_hour, calendar_end_hour) × 7 days, each cell carrying:
  (date "YYYY-MM-DD", hour, quarter, slot_type, cell_id)

Layers, applied per cell:
✓ schedule rules (base classification)
✓ open_until cut-off (bookable cells at/after it → UNAVAILABLE)
✓ appointments + buffer (bookable cells overlapping → BOOKED)

UNAVAILABLE cells are never turned into BOOKED.
"""

from datetime import date, timedelta
from typing import Iterable

from sqlalchemy.orm import Session

from ...models.enums import AppointmentStatus, SlotType, BOOKED
from .config import BookingConfig, StaffSchedule, get_booking_config
from .rules import resolve_slot_type, rules_for_day
from .store import get_active_appointments, get_schedule_rules, get_staff_schedule
from .timeutils import as_utc, local_to_utc, make_cell_id


def compute_week_slots(
    db: Session,
    staff_id: int,
    week_start: date,
    config: BookingConfig | None = None,
) -> list[dict]:
    """
    Compute the 15-minute grid for the week starting at `week_start` (Monday).

    Reads a fresh snapshot of settings, rules and appointments on every call.
    """
    config = config or get_booking_config()

    schedule = get_staff_schedule(db, staff_id, config)
    rules = get_schedule_rules(db, staff_id)

    # Only appointments that can touch this week (buffer included)
    window_start = local_to_utc(week_start, 0, schedule.timezone)
    window_end = local_to_utc(week_start + timedelta(days=7), 0, schedule.timezone)
    appointments = get_active_appointments(
        db,
        staff_id,
        start=window_start - timedelta(minutes=schedule.buffer_minutes),
        end=window_end,
    )

    return build_week_grid(schedule, rules, appointments, week_start, config)


def build_week_grid(
    schedule: StaffSchedule,
    rules: Iterable,
    appointments: Iterable,
    week_start: date,
    config: BookingConfig | None = None,
) -> list[dict]:
    """Pure grid computation over an already-loaded snapshot."""
    config = config or get_booking_config()
    step = config.slot_step_minutes
    rules = list(rules)
    buffer = timedelta(minutes=schedule.buffer_minutes)

    busy = [
        (as_utc(appt.start_time), as_utc(appt.end_time) + buffer)
        for appt in appointments
        if appt.status != AppointmentStatus.CANCELLED
    ]

    cells: list[dict] = []
    for day_offset in range(7):
        day = week_start + timedelta(days=day_offset)
        # week_start is a Monday: offset 0 → day_of_week 1, offset 6 → 0 (Sunday)
        dow = (day_offset + 1) % 7
        day_rules = rules_for_day(rules, dow)

        for hour in range(schedule.calendar_start_hour, schedule.calendar_end_hour):
            for quarter in range(config.quarters_per_hour):
                minute = hour * 60 + quarter * step
                slot_type = resolve_slot_type(day_rules, dow, minute)

                if slot_type != SlotType.UNAVAILABLE:
                    cell_start = local_to_utc(day, minute, schedule.timezone)
                    cell_end = cell_start + timedelta(minutes=step)

                    if schedule.open_until is not None and cell_start >= schedule.open_until:
                        slot_type = SlotType.UNAVAILABLE
                    elif any(cell_start < busy_end and cell_end > busy_start for busy_start, busy_end in busy):
                        slot_type = BOOKED

                cells.append({
                    "date": day.isoformat(),
                    "hour": hour,
                    "quarter": quarter,
                    "slot_type": slot_type.value if isinstance(slot_type, SlotType) else slot_type,
                    "cell_id": make_cell_id(day, hour, quarter),
                })

    return cells
