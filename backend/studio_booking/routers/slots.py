# backend/studio_booking/routers/slots.py
"""
Slots API endpoints.

GET /slots - weekly 15-minute availability grid for a staff member
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Staff as DBStaff
from ..schemas.slots import SlotCell
from ..services.errors import BookingValidationError, NotFoundError
from ..services.slots import compute_week_slots, get_booking_config


router = APIRouter(prefix="/slots", tags=["slots"])


@router.get("", response_model=list[SlotCell])
def get_week_slots(
    response: Response,
    staff_id: int,
    week_start: date = Query(..., description="Monday of the week, YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    """Grid of the week starting at week_start; computed fresh on every request."""
    if week_start.weekday() != 0:
        raise BookingValidationError(f"week_start must be a Monday, got {week_start.isoformat()}")
    if not db.get(DBStaff, staff_id):
        raise NotFoundError(f"Staff {staff_id} not found")

    response.headers["Cache-Control"] = "no-store"
    return compute_week_slots(db, staff_id, week_start, get_booking_config())
