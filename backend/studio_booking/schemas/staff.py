# backend/studio_booking/schemas/staff.py

from typing import Optional
from pydantic import BaseModel, Field

from .staff_settings import StaffSettingsRead


class StaffCreate(BaseModel):
    name: str = Field(min_length=1)
    avatar_url: Optional[str] = None
    is_default: bool = False

    model_config = {"from_attributes": True}


class StaffRead(BaseModel):
    id: int
    name: str
    avatar_url: Optional[str] = None
    is_active: bool
    is_default: bool
    settings: Optional[StaffSettingsRead] = None

    model_config = {"from_attributes": True}
