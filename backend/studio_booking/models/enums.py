# backend/studio_booking/models/enums.py

from enum import Enum


class SlotType(str, Enum):
    """Classification a schedule rule assigns to the minutes it covers."""
    AVAILABLE = "AVAILABLE"
    PENDING_CONFIRM = "PENDING_CONFIRM"
    UNAVAILABLE = "UNAVAILABLE"


# Grid-only marker: cell overlaps an appointment (plus buffer).
# Never stored on a rule.
BOOKED = "BOOKED"


class AppointmentStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
