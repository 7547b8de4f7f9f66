# backend/studio_booking/schemas/schedule_rules.py

import re
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..services.slots.timeutils import is_quarter_aligned, time_str_to_minutes

TIME_RE = re.compile(r"^\d{2}:\d{2}$")

SlotTypeName = Literal["AVAILABLE", "PENDING_CONFIRM", "UNAVAILABLE"]


def check_rule_time(v: str) -> str:
    """Validate "HH:MM", 00:00..24:00, minutes a multiple of 15."""
    if not TIME_RE.match(v):
        raise ValueError("Time must be in HH:MM format")
    minutes = int(v.split(":")[1])
    if minutes >= 60 or time_str_to_minutes(v) > 24 * 60:
        raise ValueError("Time must be between 00:00 and 24:00")
    if not is_quarter_aligned(v):
        raise ValueError("Minutes must be a multiple of 15")
    return v


def check_rule_range(start_time: str, end_time: str) -> None:
    if time_str_to_minutes(end_time) <= time_str_to_minutes(start_time):
        raise ValueError("end_time must be later than start_time")


class ScheduleRuleCreate(BaseModel):
    staff_id: int
    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday … 6 = Saturday")
    start_time: str
    end_time: str
    slot_type: SlotTypeName = "AVAILABLE"

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return check_rule_time(v)

    @model_validator(mode="after")
    def validate_range(self):
        check_rule_range(self.start_time, self.end_time)
        return self


class ScheduleRuleUpdate(BaseModel):
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    slot_type: Optional[SlotTypeName] = None

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return check_rule_time(v) if v is not None else None


class ScheduleRuleRead(BaseModel):
    id: int
    staff_id: int
    day_of_week: int
    start_time: str
    end_time: str
    slot_type: str

    model_config = {"from_attributes": True}


class RuleOverlap(BaseModel):
    """Two same-day rules whose intervals intersect (warning only)."""
    day_of_week: int
    first: ScheduleRuleRead
    second: ScheduleRuleRead
