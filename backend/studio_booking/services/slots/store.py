# backend/studio_booking/services/slots/store.py
"""
Snapshot readers for the slots engine.

Every call hits the database: grids are a pure function of
(rules, settings, appointments, week), so nothing is cached here.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from ...models.enums import AppointmentStatus
from ...models.tables import (
    Appointments as DBAppointments,
    ScheduleRules as DBScheduleRules,
    StaffSettings as DBStaffSettings,
)
from .config import BookingConfig, StaffSchedule, get_booking_config
from .timeutils import to_db_utc


def get_settings_record(db: Session, staff_id: int) -> DBStaffSettings | None:
    return (
        db.query(DBStaffSettings)
        .filter(DBStaffSettings.staff_id == staff_id)
        .first()
    )


def get_or_create_settings(
    db: Session,
    staff_id: int,
    config: BookingConfig | None = None,
) -> DBStaffSettings:
    """Settings row for staff, created with defaults if absent (flushed, not committed)."""
    record = get_settings_record(db, staff_id)
    if record:
        return record

    config = config or get_booking_config()
    record = DBStaffSettings(
        staff_id=staff_id,
        timezone=config.default_timezone,
        buffer_minutes=config.default_buffer_minutes,
        calendar_start_hour=config.default_calendar_start_hour,
        calendar_end_hour=config.default_calendar_end_hour,
    )
    db.add(record)
    db.flush()
    return record


def get_staff_schedule(
    db: Session,
    staff_id: int,
    config: BookingConfig | None = None,
) -> StaffSchedule:
    """Default-filled settings view; does not write."""
    return StaffSchedule.from_record(get_settings_record(db, staff_id), config)


def get_schedule_rules(db: Session, staff_id: int) -> list[DBScheduleRules]:
    return (
        db.query(DBScheduleRules)
        .filter(DBScheduleRules.staff_id == staff_id)
        .order_by(DBScheduleRules.day_of_week, DBScheduleRules.start_time)
        .all()
    )


def get_active_appointments(
    db: Session,
    staff_id: int,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[DBAppointments]:
    """
    Non-cancelled appointments for staff.

    With bounds, only appointments intersecting [start, end) are returned.
    """
    query = db.query(DBAppointments).filter(
        DBAppointments.staff_id == staff_id,
        DBAppointments.status != AppointmentStatus.CANCELLED.value,
    )
    if end is not None:
        query = query.filter(DBAppointments.start_time < to_db_utc(end))
    if start is not None:
        query = query.filter(DBAppointments.end_time > to_db_utc(start))
    return query.order_by(DBAppointments.start_time).all()
