# backend/studio_booking/routers/time_blocks.py
# API.md:
# - GET /time-blocks = public, active only
# - PATCH = ALLOWED
# - DELETE = soft-delete (is_active) while non-cancelled appointments exist,
#   hard delete otherwise

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.enums import AppointmentStatus
from ..models.tables import (
    Appointments as DBAppointments,
    Staff as DBStaff,
    TimeBlocks as DBTimeBlocks,
)
from ..schemas.time_blocks import (
    TimeBlockCreate,
    TimeBlockDeleteResult,
    TimeBlockRead,
    TimeBlockUpdate,
)

router = APIRouter(tags=["time-blocks"])


@router.get("/time-blocks", response_model=list[TimeBlockRead])
def list_time_blocks(staff_id: int, db: Session = Depends(get_db)):
    return (
        db.query(DBTimeBlocks)
        .filter(DBTimeBlocks.staff_id == staff_id, DBTimeBlocks.is_active == 1)
        .order_by(DBTimeBlocks.name)
        .all()
    )


@router.post("/admin/time-blocks", response_model=TimeBlockRead, status_code=status.HTTP_201_CREATED)
def create_time_block(data: TimeBlockCreate, db: Session = Depends(get_db)):
    if not db.get(DBStaff, data.staff_id):
        raise HTTPException(status_code=404, detail="Staff not found")

    obj = DBTimeBlocks(**data.model_dump(), is_active=1)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/admin/time-blocks/{id}", response_model=TimeBlockRead)
def update_time_block(
    id: int,
    data: TimeBlockUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBTimeBlocks, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if field == "is_active":
            value = int(value)
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/admin/time-blocks/{id}", response_model=TimeBlockDeleteResult)
def delete_time_block(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBTimeBlocks, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    in_use = (
        db.query(DBAppointments)
        .filter(
            DBAppointments.time_block_id == id,
            DBAppointments.status != AppointmentStatus.CANCELLED.value,
        )
        .count()
    )
    if in_use:
        obj.is_active = 0
        db.commit()
        return TimeBlockDeleteResult(
            id=id,
            deleted=False,
            warning="Time block has open appointments and was deactivated instead",
        )

    referenced = db.query(DBAppointments).filter(DBAppointments.time_block_id == id).count()
    if referenced:
        # Cancelled appointments still point at the block
        obj.is_active = 0
        db.commit()
        return TimeBlockDeleteResult(id=id, deleted=False)

    db.delete(obj)
    db.commit()
    return TimeBlockDeleteResult(id=id, deleted=True)
