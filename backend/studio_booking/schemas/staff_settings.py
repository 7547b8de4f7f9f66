# backend/studio_booking/schemas/staff_settings.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.slots.timeutils import as_utc, is_valid_timezone


class StaffSettingsUpdate(BaseModel):
    timezone: Optional[str] = None
    buffer_minutes: Optional[int] = Field(None, ge=0)
    open_until: Optional[datetime] = None
    calendar_start_hour: Optional[int] = Field(None, ge=0, le=23)
    calendar_end_hour: Optional[int] = Field(None, ge=1, le=24)

    model_config = {"from_attributes": True}

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_valid_timezone(v):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @model_validator(mode="after")
    def validate_hours(self):
        start, end = self.calendar_start_hour, self.calendar_end_hour
        if start is not None and end is not None and end <= start:
            raise ValueError("calendar_end_hour must be later than calendar_start_hour")
        return self


class StaffSettingsRead(BaseModel):
    id: int
    staff_id: int
    timezone: str
    buffer_minutes: int
    open_until: Optional[datetime] = None
    calendar_start_hour: int
    calendar_end_hour: int

    model_config = {"from_attributes": True}

    @field_validator("open_until")
    @classmethod
    def tag_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None
