# backend/studio_booking/schemas/slots.py
"""
Pydantic schemas for slots API.
"""

from pydantic import BaseModel, Field


class SlotCell(BaseModel):
    """A single 15-minute cell of the weekly grid."""
    date: str = Field(description="YYYY-MM-DD in the staff timezone")
    hour: int = Field(ge=0, le=23)
    quarter: int = Field(ge=0, le=3, description="0..3 → :00, :15, :30, :45")
    slot_type: str = Field(description="AVAILABLE / PENDING_CONFIRM / UNAVAILABLE / BOOKED")
    cell_id: str = Field(description="'date|hour|quarter'")

    model_config = {"from_attributes": True}
