# backend/studio_booking/routers/schedule_rules.py
# API.md:
# - PATCH = ALLOWED
# - DELETE = hard delete
# - overlapping same-day rules are accepted and only reported

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import ScheduleRules as DBScheduleRules, Staff as DBStaff
from ..schemas.schedule_rules import (
    RuleOverlap,
    ScheduleRuleCreate,
    ScheduleRuleRead,
    ScheduleRuleUpdate,
    check_rule_range,
)
from ..services.slots import find_rule_overlaps
from ..services.slots.store import get_schedule_rules

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/schedule-rules", tags=["schedule-rules"])


def _warn_on_overlap(db: Session, staff_id: int, day_of_week: int) -> None:
    overlaps = find_rule_overlaps(get_schedule_rules(db, staff_id))
    if day_of_week in overlaps:
        logger.warning(f"Schedule rules overlap for staff {staff_id} on day {day_of_week}")


@router.get("", response_model=list[ScheduleRuleRead])
def list_rules(staff_id: int, db: Session = Depends(get_db)):
    return get_schedule_rules(db, staff_id)


@router.get("/overlaps", response_model=list[RuleOverlap])
def list_rule_overlaps(staff_id: int, db: Session = Depends(get_db)):
    overlaps = find_rule_overlaps(get_schedule_rules(db, staff_id))
    return [
        RuleOverlap(
            day_of_week=day,
            first=ScheduleRuleRead.model_validate(first),
            second=ScheduleRuleRead.model_validate(second),
        )
        for day, pairs in overlaps.items()
        for first, second in pairs
    ]


@router.post("", response_model=ScheduleRuleRead, status_code=status.HTTP_201_CREATED)
def create_rule(data: ScheduleRuleCreate, db: Session = Depends(get_db)):
    if not db.get(DBStaff, data.staff_id):
        raise HTTPException(status_code=404, detail="Staff not found")

    obj = DBScheduleRules(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)

    _warn_on_overlap(db, obj.staff_id, obj.day_of_week)
    return obj


@router.patch("/{id}", response_model=ScheduleRuleRead)
def update_rule(
    id: int,
    data: ScheduleRuleUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBScheduleRules, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    try:
        check_rule_range(
            changes.get("start_time") or obj.start_time,
            changes.get("end_time") or obj.end_time,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    for field, value in changes.items():
        if value is not None:
            setattr(obj, field, value)

    db.commit()
    db.refresh(obj)

    _warn_on_overlap(db, obj.staff_id, obj.day_of_week)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBScheduleRules, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    db.delete(obj)
    db.commit()
