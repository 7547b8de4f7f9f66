# backend/studio_booking/schemas/time_blocks.py

from typing import Optional
from pydantic import BaseModel, Field

COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class TimeBlockCreate(BaseModel):
    staff_id: int
    name: str = Field(min_length=1)
    duration_mins: int = Field(ge=1)
    color: str = Field("#6366f1", pattern=COLOR_PATTERN)

    model_config = {"from_attributes": True}


class TimeBlockUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    duration_mins: Optional[int] = Field(None, ge=1)
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)
    is_active: Optional[bool] = None

    model_config = {"from_attributes": True}


class TimeBlockRead(BaseModel):
    id: int
    staff_id: int
    name: str
    duration_mins: int
    color: str
    is_active: bool

    model_config = {"from_attributes": True}


class TimeBlockDeleteResult(BaseModel):
    id: int
    deleted: bool
    warning: Optional[str] = None
