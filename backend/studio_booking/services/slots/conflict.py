# backend/studio_booking/services/slots/conflict.py
"""
Conflict detection between a candidate interval and existing appointments.

The candidate end must already include the staff buffer:
    [start, end + buffer_minutes)
Existing appointments are compared on [start_time, end_time + existing_buffer):
    existing.start < candidate_end AND existing.end + existing_buffer > candidate_start
With existing_buffer = 0 this is the plain raw-interval overlap. The booking
flow passes the staff buffer so that no two buffered intervals ever overlap,
whichever of the two was booked first.

CANCELLED appointments never conflict. Only the first conflict is reported.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...models.enums import AppointmentStatus
from ...models.tables import Appointments as DBAppointments
from .timeutils import as_utc, to_db_utc


@dataclass(frozen=True)
class ConflictResult:
    """The existing appointment that blocks a candidate interval."""
    appointment_id: int
    start_time: datetime
    end_time: datetime
    client_name: str

    @classmethod
    def from_appointment(cls, appt) -> "ConflictResult":
        return cls(
            appointment_id=appt.id,
            start_time=as_utc(appt.start_time),
            end_time=as_utc(appt.end_time),
            client_name=appt.client_name,
        )

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "client_name": self.client_name,
        }


def find_conflict(
    appointments: Iterable,
    start_time: datetime,
    end_time: datetime,
    exclude_appointment_id: Optional[int] = None,
    existing_buffer_minutes: int = 0,
) -> Optional[ConflictResult]:
    """In-memory variant of check_conflict over already-loaded appointments."""
    start, end = as_utc(start_time), as_utc(end_time)
    buffer = timedelta(minutes=existing_buffer_minutes)
    for appt in appointments:
        if appt.status == AppointmentStatus.CANCELLED:
            continue
        if exclude_appointment_id is not None and appt.id == exclude_appointment_id:
            continue
        if as_utc(appt.start_time) < end and as_utc(appt.end_time) + buffer > start:
            return ConflictResult.from_appointment(appt)
    return None


def check_conflict(
    db: Session,
    staff_id: int,
    start_time: datetime,
    end_time: datetime,
    exclude_appointment_id: Optional[int] = None,
    existing_buffer_minutes: int = 0,
) -> Optional[ConflictResult]:
    """
    Find the first non-cancelled appointment of `staff_id` overlapping
    [start_time, end_time). `end_time` already includes the buffer.

    Args:
        exclude_appointment_id: appointment to ignore (reschedule self-check)
        existing_buffer_minutes: buffer trailing each existing appointment
    """
    # existing.end + buffer > start  ⇔  existing.end > start - buffer
    earliest_end = as_utc(start_time) - timedelta(minutes=existing_buffer_minutes)

    query = db.query(DBAppointments).filter(
        DBAppointments.staff_id == staff_id,
        DBAppointments.status != AppointmentStatus.CANCELLED.value,
        DBAppointments.start_time < to_db_utc(end_time),
        DBAppointments.end_time > to_db_utc(earliest_end),
    )
    if exclude_appointment_id is not None:
        query = query.filter(DBAppointments.id != exclude_appointment_id)

    conflict = query.order_by(DBAppointments.start_time).first()
    if not conflict:
        return None
    return ConflictResult.from_appointment(conflict)
