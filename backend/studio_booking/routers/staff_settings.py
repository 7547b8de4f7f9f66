# backend/studio_booking/routers/staff_settings.py
# API.md:
# - GET creates the record with defaults when missing
# - PUT = upsert

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Staff as DBStaff
from ..schemas.staff_settings import StaffSettingsRead, StaffSettingsUpdate
from ..services.slots.store import get_or_create_settings
from ..services.slots.timeutils import to_db_utc

router = APIRouter(prefix="/admin/settings", tags=["settings"])


def _get_staff_or_404(db: Session, staff_id: int) -> DBStaff:
    staff = db.get(DBStaff, staff_id)
    if not staff:
        raise HTTPException(status_code=404, detail="Staff not found")
    return staff


@router.get("/{staff_id}", response_model=StaffSettingsRead)
def get_settings(staff_id: int, db: Session = Depends(get_db)):
    _get_staff_or_404(db, staff_id)
    obj = get_or_create_settings(db, staff_id)
    db.commit()
    db.refresh(obj)
    return obj


@router.put("/{staff_id}", response_model=StaffSettingsRead)
def update_settings(
    staff_id: int,
    data: StaffSettingsUpdate,
    db: Session = Depends(get_db),
):
    _get_staff_or_404(db, staff_id)
    obj = get_or_create_settings(db, staff_id)

    changes = data.model_dump(exclude_unset=True)

    start = changes.get("calendar_start_hour", obj.calendar_start_hour)
    end = changes.get("calendar_end_hour", obj.calendar_end_hour)
    if start is not None and end is not None and end <= start:
        db.rollback()
        raise HTTPException(status_code=400, detail="calendar_end_hour must be later than calendar_start_hour")

    for field, value in changes.items():
        if field == "open_until":
            obj.open_until = to_db_utc(value) if value is not None else None
        elif value is not None:
            setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj
