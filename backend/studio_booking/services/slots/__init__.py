# backend/studio_booking/services/slots/__init__.py
"""
Slots engine.

Grid:      weekly 15-minute availability grid (rules + cut-off + bookings)
Window:    working-hours coverage of a proposed appointment
Conflict:  overlap with existing appointments (buffer folded into the end)
Status:    CONFIRMED / PENDING decision for a new appointment
"""

from .config import BookingConfig, StaffSchedule, get_booking_config
from .calculator import build_week_grid, compute_week_slots
from .conflict import ConflictResult, check_conflict, find_conflict
from .rules import find_rule_overlaps, is_bookable, resolve_slot_type
from .status import resolve_booking_status
from .window import is_window_within_rules, validate_appointment_window

__all__ = [
    "BookingConfig",
    "StaffSchedule",
    "get_booking_config",
    "build_week_grid",
    "compute_week_slots",
    "ConflictResult",
    "check_conflict",
    "find_conflict",
    "find_rule_overlaps",
    "is_bookable",
    "resolve_slot_type",
    "resolve_booking_status",
    "is_window_within_rules",
    "validate_appointment_window",
]
