# backend/studio_booking/routers/staff.py
# API.md:
# - GET /staff = public, active only
# - POST /admin/staff copies defaults from the default staff member

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from ..database import get_db
from ..models.tables import Staff as DBStaff
from ..schemas.staff import StaffCreate, StaffRead
from ..services.staff_defaults import apply_defaults

router = APIRouter(tags=["staff"])


@router.get("/staff", response_model=list[StaffRead])
def list_staff(db: Session = Depends(get_db)):
    return (
        db.query(DBStaff)
        .options(joinedload(DBStaff.settings))
        .filter(DBStaff.is_active == 1)
        .order_by(DBStaff.name)
        .all()
    )


@router.post("/admin/staff", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
def create_staff(data: StaffCreate, db: Session = Depends(get_db)):
    obj = DBStaff(
        name=data.name,
        avatar_url=data.avatar_url or None,
        is_active=1,
        is_default=int(data.is_default),
    )
    db.add(obj)
    db.flush()

    apply_defaults(db, obj.id)

    db.commit()
    db.refresh(obj)
    return obj


@router.post("/admin/staff/{id}/restore-defaults", response_model=StaffRead)
def restore_defaults(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBStaff, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Staff not found")

    if not apply_defaults(db, id, replace_blocks=True):
        raise HTTPException(status_code=404, detail="Default staff not found")

    db.commit()
    db.refresh(obj)
    return obj
