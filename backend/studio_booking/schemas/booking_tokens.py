# backend/studio_booking/schemas/booking_tokens.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class BookingTokenCreate(BaseModel):
    staff_id: Optional[int] = None
    time_block_id: Optional[int] = None
    client_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    wechat: Optional[str] = None
    expires_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingTokenRead(BookingTokenCreate):
    id: int
    token: str
    used_at: Optional[datetime] = None


class BookingTokenPrefill(BaseModel):
    """Public view: only what the booking form needs."""
    staff_id: Optional[int] = None
    time_block_id: Optional[int] = None
    client_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    wechat: Optional[str] = None

    model_config = {"from_attributes": True}
