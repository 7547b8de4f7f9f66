# backend/studio_booking/routers/appointments.py
# API.md:
# - POST /appointments = public booking
# - /admin/appointments: list, get, PATCH (edit/reschedule), DELETE = soft cancel

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Appointments as DBAppointments
from ..schemas.appointments import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentUpdate,
)
from ..services import booking_manager
from ..services.slots.timeutils import to_db_utc

router = APIRouter(tags=["appointments"])


@router.post("/appointments", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    db: Session = Depends(get_db),
):
    return booking_manager.create_appointment(db, data)


# ---------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------

@router.get("/admin/appointments", response_model=list[AppointmentRead])
def list_appointments(
    staff_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
):
    query = db.query(DBAppointments)
    if staff_id is not None:
        query = query.filter(DBAppointments.staff_id == staff_id)
    if start is not None:
        query = query.filter(DBAppointments.start_time >= to_db_utc(start))
    if end is not None:
        query = query.filter(DBAppointments.end_time <= to_db_utc(end))
    return query.order_by(DBAppointments.start_time).all()


@router.get("/admin/appointments/{id}", response_model=AppointmentRead)
def get_appointment(id: int, db: Session = Depends(get_db)):
    return booking_manager.get_appointment(db, id)


@router.patch("/admin/appointments/{id}", response_model=AppointmentRead)
def update_appointment(
    id: int,
    data: AppointmentUpdate,
    db: Session = Depends(get_db),
):
    return booking_manager.update_appointment(db, id, data)


@router.delete("/admin/appointments/{id}", response_model=AppointmentRead)
def cancel_appointment(id: int, db: Session = Depends(get_db)):
    return booking_manager.cancel_appointment(db, id)
