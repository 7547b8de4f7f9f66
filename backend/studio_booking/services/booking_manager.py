# backend/studio_booking/services/booking_manager.py
"""
Appointment lifecycle: create, edit/reschedule, cancel.

Create:
  1. staff and time block must exist (block active, owned by the staff)
  2. window must end by open_until and lie inside bookable rules
                                               → OutsideWorkingHoursError
  3. buffered interval must not overlap others → TimeConflictError
  4. status from the rule at the start minute (CONFIRMED / PENDING)
  5. write + commit, then emit event

The conflict check and the insert run in the same session transaction.
Serializing concurrent bookings of one staff member is the storage
layer's job; the loser of a race gets TimeConflictError on retry.
"""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from ..models.enums import AppointmentStatus
from ..models.tables import (
    Appointments as DBAppointments,
    BookingTokens as DBBookingTokens,
    Staff as DBStaff,
    TimeBlocks as DBTimeBlocks,
)
from ..schemas.appointments import AppointmentCreate, AppointmentUpdate
from .errors import (
    BookingValidationError,
    NotFoundError,
    OutsideWorkingHoursError,
    TimeConflictError,
)
from .events import appointment_payload, emit_event
from .slots.config import BookingConfig
from .slots.conflict import check_conflict
from .slots.status import resolve_booking_status
from .slots.store import get_schedule_rules, get_staff_schedule
from .slots.timeutils import as_utc, to_db_utc, utc_now
from .slots.window import is_window_within_rules

logger = logging.getLogger(__name__)


def _get_active_staff(db: Session, staff_id: int) -> DBStaff:
    staff = db.get(DBStaff, staff_id)
    if not staff or not staff.is_active:
        raise NotFoundError(f"Staff {staff_id} not found")
    return staff


def _get_bookable_time_block(db: Session, time_block_id: int, staff_id: int) -> DBTimeBlocks:
    block = db.get(DBTimeBlocks, time_block_id)
    if not block or block.staff_id != staff_id or not block.is_active:
        raise NotFoundError(f"Time block {time_block_id} not found")
    return block


def _ensure_no_conflict(
    db: Session,
    staff_id: int,
    start,
    end,
    buffer_minutes: int,
    exclude_appointment_id: int | None = None,
) -> None:
    conflict = check_conflict(
        db,
        staff_id,
        start,
        end + timedelta(minutes=buffer_minutes),
        exclude_appointment_id=exclude_appointment_id,
        existing_buffer_minutes=buffer_minutes,
    )
    if conflict:
        logger.info(
            f"Time conflict for staff {staff_id}: {start.isoformat()} overlaps "
            f"appointment {conflict.appointment_id}"
        )
        raise TimeConflictError(conflict)


def _consume_token(db: Session, token: str) -> None:
    """Mark an unused booking token as used (unknown/used tokens are ignored)."""
    updated = (
        db.query(DBBookingTokens)
        .filter(DBBookingTokens.token == token, DBBookingTokens.used_at.is_(None))
        .update({DBBookingTokens.used_at: to_db_utc(utc_now())}, synchronize_session=False)
    )
    if not updated:
        logger.warning(f"Booking token not consumed (unknown or already used): {token}")


def create_appointment(
    db: Session,
    data: AppointmentCreate,
    config: BookingConfig | None = None,
) -> DBAppointments:
    """Validate and persist a new appointment. Raises BookingError subclasses."""
    _get_active_staff(db, data.staff_id)
    block = _get_bookable_time_block(db, data.time_block_id, data.staff_id)

    schedule = get_staff_schedule(db, data.staff_id, config)
    rules = get_schedule_rules(db, data.staff_id)

    start = as_utc(data.start_time)
    end = start + timedelta(minutes=block.duration_mins)

    # Any quarter starting at/after open_until is closed, as on the grid
    if schedule.open_until is not None and end > schedule.open_until:
        logger.info(f"Booking rejected for staff {data.staff_id}: {start.isoformat()} past open_until")
        raise OutsideWorkingHoursError("Booking is not open for the requested time yet")

    if not is_window_within_rules(schedule, rules, start, end, config):
        logger.info(f"Booking rejected for staff {data.staff_id}: {start.isoformat()} outside working hours")
        raise OutsideWorkingHoursError()

    _ensure_no_conflict(db, data.staff_id, start, end, schedule.buffer_minutes)

    status = resolve_booking_status(schedule, rules, start)

    if data.booking_token:
        _consume_token(db, data.booking_token)

    appt = DBAppointments(
        staff_id=data.staff_id,
        time_block_id=block.id,
        client_name=data.client_name,
        phone=data.phone,
        email=data.email,
        wechat=data.wechat,
        start_time=to_db_utc(start),
        end_time=to_db_utc(end),
        status=status.value,
        booking_token=data.booking_token,
    )
    db.add(appt)
    db.commit()
    db.refresh(appt)

    logger.info(
        f"Appointment {appt.id} created for staff {appt.staff_id} "
        f"at {start.isoformat()} ({status.value})"
    )
    emit_event("booking_created", appointment_payload(appt))
    return appt


def get_appointment(db: Session, appointment_id: int) -> DBAppointments:
    appt = db.get(DBAppointments, appointment_id)
    if not appt:
        raise NotFoundError(f"Appointment {appointment_id} not found")
    return appt


def update_appointment(
    db: Session,
    appointment_id: int,
    data: AppointmentUpdate,
    config: BookingConfig | None = None,
) -> DBAppointments:
    """
    Admin edit.

    A new start time or time block re-derives end_time and re-runs the
    conflict check (excluding this appointment). Working-hours rules are
    not re-checked. CANCELLED is terminal.
    """
    appt = get_appointment(db, appointment_id)
    old_status = appt.status
    fields = data.model_dump(exclude_unset=True)

    if old_status == AppointmentStatus.CANCELLED and any(
        fields.get(k) is not None for k in ("start_time", "time_block_id")
    ):
        raise BookingValidationError("Cancelled appointments cannot be rescheduled")
    if old_status == AppointmentStatus.CANCELLED and fields.get("status") not in (None, AppointmentStatus.CANCELLED):
        raise BookingValidationError("Cancelled appointments cannot be reactivated")

    rescheduled = False
    new_block_id = fields.get("time_block_id")
    new_start = fields.get("start_time")
    if new_start is not None or (new_block_id is not None and new_block_id != appt.time_block_id):
        if new_block_id is not None and new_block_id != appt.time_block_id:
            block = _get_bookable_time_block(db, new_block_id, appt.staff_id)
        else:
            block = appt.time_block
        if block is None:
            raise NotFoundError(f"Time block {appt.time_block_id} not found")

        start = as_utc(new_start) if new_start is not None else as_utc(appt.start_time)
        end = start + timedelta(minutes=block.duration_mins)

        schedule = get_staff_schedule(db, appt.staff_id, config)
        _ensure_no_conflict(db, appt.staff_id, start, end, schedule.buffer_minutes, exclude_appointment_id=appt.id)

        appt.start_time = to_db_utc(start)
        appt.end_time = to_db_utc(end)
        appt.time_block_id = block.id
        rescheduled = True

    if fields.get("status") is not None:
        appt.status = fields["status"]
    if fields.get("notes") is not None:
        appt.notes = fields["notes"]
    appt.updated_at = to_db_utc(utc_now())

    db.commit()
    db.refresh(appt)

    payload = appointment_payload(appt)
    if rescheduled:
        logger.info(f"Appointment {appt.id} rescheduled to {as_utc(appt.start_time).isoformat()}")
        emit_event("booking_rescheduled", payload)
    if appt.status != old_status:
        logger.info(f"Appointment {appt.id} status {old_status} → {appt.status}")
        if appt.status == AppointmentStatus.CONFIRMED:
            emit_event("booking_confirmed", payload)
        elif appt.status == AppointmentStatus.CANCELLED:
            emit_event("booking_cancelled", payload)
    return appt


def cancel_appointment(db: Session, appointment_id: int) -> DBAppointments:
    """Soft delete: status → CANCELLED. The row is kept."""
    appt = get_appointment(db, appointment_id)
    if appt.status == AppointmentStatus.CANCELLED:
        return appt

    appt.status = AppointmentStatus.CANCELLED.value
    appt.updated_at = to_db_utc(utc_now())
    db.commit()
    db.refresh(appt)

    logger.info(f"Appointment {appt.id} cancelled")
    emit_event("booking_cancelled", appointment_payload(appt))
    return appt
