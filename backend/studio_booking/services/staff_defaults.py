# backend/studio_booking/services/staff_defaults.py
"""
Copy settings and time blocks from the default staff member.

Used when a staff member is created and by the restore-defaults action.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models.tables import (
    Staff as DBStaff,
    StaffSettings as DBStaffSettings,
    TimeBlocks as DBTimeBlocks,
)
from .slots.store import get_settings_record

logger = logging.getLogger(__name__)

SETTINGS_FIELDS = (
    "timezone",
    "buffer_minutes",
    "open_until",
    "calendar_start_hour",
    "calendar_end_hour",
)


def get_default_staff(db: Session, exclude_id: Optional[int] = None) -> Optional[DBStaff]:
    query = db.query(DBStaff).filter(DBStaff.is_default == 1)
    if exclude_id is not None:
        query = query.filter(DBStaff.id != exclude_id)
    return query.order_by(DBStaff.id).first()


def copy_settings(db: Session, source: DBStaff, target_id: int) -> Optional[DBStaffSettings]:
    """Upsert target settings from source; no-op when source has none."""
    src = get_settings_record(db, source.id)
    if src is None:
        return None

    dst = get_settings_record(db, target_id)
    if dst is None:
        dst = DBStaffSettings(staff_id=target_id)
        db.add(dst)
    for field in SETTINGS_FIELDS:
        setattr(dst, field, getattr(src, field))
    return dst


def copy_time_blocks(db: Session, source: DBStaff, target_id: int, replace: bool = False) -> int:
    """
    Create copies of source's active time blocks for target.

    With replace=True, the target's existing blocks are deactivated first
    (never deleted: appointments keep their block).
    """
    if replace:
        (
            db.query(DBTimeBlocks)
            .filter(DBTimeBlocks.staff_id == target_id)
            .update({DBTimeBlocks.is_active: 0}, synchronize_session=False)
        )

    active = (
        db.query(DBTimeBlocks)
        .filter(DBTimeBlocks.staff_id == source.id, DBTimeBlocks.is_active == 1)
        .all()
    )
    for block in active:
        db.add(DBTimeBlocks(
            staff_id=target_id,
            name=block.name,
            duration_mins=block.duration_mins,
            color=block.color,
            is_active=1,
        ))
    return len(active)


def apply_defaults(db: Session, target_id: int, replace_blocks: bool = False) -> bool:
    """Apply default staff's settings and blocks to target. False if no default staff."""
    source = get_default_staff(db, exclude_id=target_id)
    if source is None:
        return False

    copy_settings(db, source, target_id)
    copied = copy_time_blocks(db, source, target_id, replace=replace_blocks)
    logger.info(f"Applied defaults from staff {source.id} to staff {target_id} ({copied} time blocks)")
    return True
