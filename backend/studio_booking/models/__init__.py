from .tables import Base, metadata
from .enums import AppointmentStatus, SlotType, BOOKED

__all__ = ["Base", "metadata", "AppointmentStatus", "SlotType", "BOOKED"]
