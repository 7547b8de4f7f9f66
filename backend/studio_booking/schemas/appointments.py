# backend/studio_booking/schemas/appointments.py

import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.slots.timeutils import as_utc

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AppointmentCreate(BaseModel):
    staff_id: int
    time_block_id: int
    start_time: datetime = Field(description="ISO datetime; naive values are read as UTC")

    client_name: str = Field(min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    wechat: Optional[str] = None

    booking_token: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("phone", "email", "wechat", "booking_token")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not EMAIL_RE.match(v):
            raise ValueError("Invalid email address")
        return v

    @model_validator(mode="after")
    def require_contact(self):
        if not (self.phone or self.email or self.wechat):
            raise ValueError("At least one contact (phone, email or wechat) is required")
        return self


class AppointmentUpdate(BaseModel):
    start_time: Optional[datetime] = None
    time_block_id: Optional[int] = None
    status: Optional[Literal["CONFIRMED", "PENDING", "CANCELLED"]] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class AppointmentRead(BaseModel):
    id: int

    staff_id: int
    time_block_id: int
    client_name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    wechat: Optional[str] = None

    start_time: datetime
    end_time: datetime

    status: str
    notes: Optional[str] = None
    booking_token: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def tag_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None
